"""Error types raised by the chat session and its controller.

Every error carries a message that is safe to show to the user; the
controller turns them into apology turns and banner text.
"""

from __future__ import annotations

from typing import Optional

from agent.core.prompt import UNKNOWN_ERROR_TEXT


class ChatError(Exception):
    """Base class for all chat failures."""

    default_message = UNKNOWN_ERROR_TEXT

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigError(ChatError):
    """Raised when the credential is missing or a setting is malformed.

    Fatal for initialization: the conversation never becomes usable.
    """


class SessionInitError(ChatError):
    """Raised when the remote chat session could not be constructed."""


class RemoteCallError(ChatError):
    """Raised when an exchange with the remote model fails.

    Covers transport errors, provider errors and replies that are not text.
    The underlying exception is kept as ``__cause__``.
    """


class EmptyResponseError(ChatError):
    """Raised when the remote model answered without any usable text."""

    default_message = "Received an empty response from the API."
