from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging
from pydantic import BaseModel, Field

from agent.controller import ConversationController
from agent.core.models import ChatSnapshot, ReadinessState
from config.settings import is_development_env


logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("chatbot")


class ChatRequest(BaseModel):
    message: str = Field(..., description="User's latest message")


class ChatResponse(BaseModel):
    accepted: bool = Field(..., description="False when the message was ignored (blank or busy)")
    snapshot: ChatSnapshot


def create_app(controller: Optional[ConversationController] = None) -> FastAPI:
    controller = controller or ConversationController()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = controller.initialize()
        logger.info("Startup complete: session_state=%s", state.value)
        yield

    app = FastAPI(title="Gemini Chat Assistant", version="1.0.0", lifespan=lifespan)
    app.state.controller = controller

    # CORS: allow local frontend during development
    settings = controller.settings
    app_env = settings.app_env if settings is not None else os.getenv("APP_ENV", "development")
    if is_development_env(app_env):
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/chat", response_model=ChatSnapshot)
    def read_chat() -> ChatSnapshot:
        return controller.snapshot()

    @app.post("/chat", response_model=ChatResponse)
    async def chat(req: ChatRequest) -> ChatResponse:
        if controller.state is not ReadinessState.READY:
            raise HTTPException(
                status_code=503,
                detail=controller.error or f"Chat session is {controller.state.value}",
            )

        logger.info("Incoming chat: message_len=%s busy=%s", len(req.message), controller.busy)
        accepted = await controller.send(req.message)
        snapshot = controller.snapshot()
        if accepted and snapshot.error:
            logger.warning("Exchange failed: %s", snapshot.error)
        return ChatResponse(accepted=accepted, snapshot=snapshot)

    @app.get("/health")
    def health():
        return {"status": "ok", "state": controller.state.value}

    return app


app = create_app()
