from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from agent.agent import SessionHandle, build_session
from agent.core import prompt
from agent.core.errors import (
    ChatError,
    ConfigError,
    EmptyResponseError,
    RemoteCallError,
    SessionInitError,
)
from agent.core.memory import Conversation
from agent.core.models import ChatSnapshot, ReadinessState, Speaker, Turn
from config.settings import Settings, get_settings


logger = logging.getLogger("chatbot.controller")

SessionFactory = Callable[[Settings], SessionHandle]
SettingsFactory = Callable[[], Settings]
Listener = Callable[[ChatSnapshot], None]


class ConversationController:
    """Owns the conversation and the remote session.

    ``initialize()`` is called once at startup; every later interaction goes
    through ``send()``. At most one exchange is in flight at any time, and
    calls made while busy or before the session is ready are ignored.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_factory: SessionFactory = build_session,
        settings_factory: SettingsFactory = get_settings,
    ) -> None:
        # None: settings are built inside initialize(), config errors included.
        self._settings = settings
        self._settings_factory = settings_factory
        self._session_factory = session_factory
        self._conversation = Conversation()
        self._session: Optional[SessionHandle] = None
        self._state = ReadinessState.UNINITIALIZED
        self._busy = False
        self._error: Optional[str] = None
        self._last_failure: Optional[ChatError] = None
        self._listeners: List[Listener] = []

    @property
    def settings(self) -> Optional[Settings]:
        return self._settings

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def last_failure(self) -> Optional[ChatError]:
        return self._last_failure

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return self._conversation.snapshot()

    def snapshot(self) -> ChatSnapshot:
        return ChatSnapshot(
            state=self._state,
            busy=self._busy,
            error=self._error,
            turns=list(self._conversation.snapshot()),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def initialize(self) -> ReadinessState:
        if self._state is not ReadinessState.UNINITIALIZED:
            logger.debug("initialize() ignored in state %s", self._state.value)
            return self._state

        self._state = ReadinessState.INITIALIZING
        self._error = None
        self._notify()

        try:
            if self._settings is None:
                self._settings = self._settings_factory()
            if not self._settings.google_api_key:
                raise ConfigError(prompt.MISSING_KEY_MESSAGE)
            session = self._session_factory(self._settings)
        except ConfigError as exc:
            logger.error("Initialization Error: %s", exc)
            self._fail_initialization(exc, exc.message)
        except Exception as exc:
            logger.exception("Initialization Error: %s", exc)
            failure = SessionInitError(str(exc) or None)
            self._fail_initialization(failure, prompt.init_failure_banner(failure.message))
        else:
            self._session = session
            self._conversation.append(
                Turn(id=prompt.GREETING_ID, speaker=Speaker.ASSISTANT, text=prompt.GREETING_TEXT)
            )
            self._state = ReadinessState.READY
            logger.info("Chat session ready: model=%s", self._settings.gemini_model)
            self._notify()

        return self._state

    def _fail_initialization(self, failure: ChatError, banner: str) -> None:
        self._session = None
        self._last_failure = failure
        self._error = banner
        self._state = ReadinessState.INIT_FAILED
        self._notify()

    async def send(self, text: str) -> bool:
        """Run one exchange for ``text``.

        Returns False without touching any state when the text is blank,
        the session is not ready, or another exchange is still in flight.
        """
        message = (text or "").strip()
        if not message:
            return False
        if self._state is not ReadinessState.READY or self._session is None:
            logger.warning("send() ignored: session state is %s", self._state.value)
            return False
        if self._busy:
            logger.warning("send() ignored: an exchange is already in flight")
            return False

        self._busy = True
        self._error = None
        self._conversation.append(Turn.user(message))
        self._notify()

        try:
            try:
                reply = await self._session.exchange(message)
            except ChatError:
                raise
            except Exception as exc:
                raise RemoteCallError(str(exc) or None) from exc
            if reply is not None and not isinstance(reply, str):
                raise RemoteCallError(f"Malformed response from the API: {type(reply).__name__}")
            reply = (reply or "").strip()
            if not reply:
                raise EmptyResponseError()
            self._conversation.append(Turn.assistant(reply))
        except ChatError as exc:
            logger.exception("API Error: %s", exc)
            self._last_failure = exc
            self._conversation.append(Turn.failure(prompt.apology_text(exc.message)))
            self._error = prompt.send_failure_banner(exc.message)
        finally:
            self._busy = False
            self._notify()

        return True
