from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from agent.core.errors import ConfigError, RemoteCallError
from agent.core.models import Speaker, Turn
from agent.core.prompt import MISSING_KEY_MESSAGE
from config.settings import Settings


logger = logging.getLogger("chatbot.session")


class SessionHandle(Protocol):
    """One continuous conversational context on the remote side."""

    async def exchange(self, text: str) -> str:
        """Send ``text`` and return the reply text, raising ``RemoteCallError``."""
        ...


def to_lc_messages(turns: Sequence[Turn]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for turn in turns or ():
        if not turn.text:
            continue
        if turn.speaker is Speaker.USER:
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    return messages


def _content_to_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                text = part.get("text")
                if not isinstance(text, str):
                    raise RemoteCallError(f"Malformed response part: {part!r}")
                parts.append(text)
        return "".join(parts)
    raise RemoteCallError(
        f"Malformed response from the API: unexpected content type {type(content).__name__}"
    )


class GeminiSession:
    """Chat session bound to one model and one growing message history.

    The history only grows when an exchange produced text, so failed
    exchanges leave the remote context untouched.
    """

    def __init__(self, llm: BaseChatModel, history: Sequence[BaseMessage] = ()) -> None:
        self._llm = llm
        self._history: List[BaseMessage] = list(history)

    @property
    def history(self) -> List[BaseMessage]:
        return list(self._history)

    async def exchange(self, text: str) -> str:
        user_message = HumanMessage(content=text)
        try:
            result = await self._llm.ainvoke(self._history + [user_message])
        except Exception as exc:
            raise RemoteCallError(str(exc) or None) from exc

        content = getattr(result, "content", None)
        if content is None:
            raise RemoteCallError("Malformed response from the API: no content")
        reply = _content_to_text(content)

        if reply.strip():
            self._history.extend([user_message, AIMessage(content=reply)])
        logger.info("Exchange done: history_messages=%s reply_chars=%s", len(self._history), len(reply))
        return reply


def build_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    if not settings.google_api_key:
        raise ConfigError(MISSING_KEY_MESSAGE)

    params: Dict[str, Any] = {
        "model": settings.gemini_model,
        "google_api_key": settings.google_api_key,
        "max_output_tokens": settings.max_output_tokens,
    }
    if settings.temperature is not None:
        params["temperature"] = settings.temperature
    if settings.top_p is not None:
        params["top_p"] = settings.top_p
    return ChatGoogleGenerativeAI(**params)


def build_session(settings: Settings, history: Sequence[Turn] = ()) -> GeminiSession:
    llm = build_llm(settings)
    logger.info(
        "Session created: model=%s max_output_tokens=%s history_turns=%s",
        settings.gemini_model,
        settings.max_output_tokens,
        len(history),
    )
    return GeminiSession(llm, history=to_lc_messages(history))
