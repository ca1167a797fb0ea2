"""Shared fixtures for the chat service test suite."""

from unittest.mock import AsyncMock

import pytest

from agent.controller import ConversationController
from config.settings import Settings


ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "MAX_OUTPUT_TOKENS",
    "MODEL_TEMPERATURE",
    "MODEL_TOP_P",
    "APP_ENV",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every setting read by the app from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env) -> Settings:
    clean_env.setenv("GEMINI_API_KEY", "test-key")
    return Settings()


@pytest.fixture
def settings_without_key(clean_env) -> Settings:
    return Settings()


@pytest.fixture
def session():
    """Fake remote session; configure ``session.exchange`` per test."""
    fake = AsyncMock()
    fake.exchange = AsyncMock(return_value="ok")
    return fake


@pytest.fixture
def controller(settings, session) -> ConversationController:
    return ConversationController(settings, session_factory=lambda _settings: session)


@pytest.fixture
def ready_controller(controller) -> ConversationController:
    controller.initialize()
    return controller
