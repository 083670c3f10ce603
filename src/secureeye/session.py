"""Conversational analysis session scoped to one vulnerability.

A session owns an append-only message thread and allows at most one
outstanding assistant request. Every outcome of ``submit`` shows up in the
thread and the awaiting flag; nothing is raised to the caller.
"""

import itertools
import logging
from enum import Enum
from typing import Callable, List, Protocol

from secureeye.gateway import GatewayReply
from secureeye.models import ChatMessage, MessageRole, SessionSnapshot, Vulnerability

logger = logging.getLogger(__name__)


PRESET_QUERIES = (
    "Analyze the vulnerability type and explain the root cause.",
    "Suggest a detailed, step-by-step remediation plan.",
    "Assess the priority and potential business impact of this vulnerability.",
    "Write a short summary of this finding for a non-technical manager.",
)

ERROR_NOTICE = "Sorry, I encountered an error."


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class Gateway(Protocol):
    async def ask(self, vulnerability: Vulnerability, query: str) -> GatewayReply: ...


SessionObserver = Callable[["AnalysisSession"], None]


def intro_message(vulnerability: Vulnerability) -> str:
    return (
        f"Analyzing vulnerability: **{vulnerability.title}**. "
        "Ask me anything or use one of the suggestions below."
    )


class AnalysisSession:
    """Stateful controller for one analyst/assistant conversation."""

    def __init__(self, vulnerability: Vulnerability, gateway: Gateway):
        """Create a session seeded with an intro system message.

        Args:
            vulnerability: The finding this session is scoped to
            gateway: Assistant gateway used for every submitted query
        """
        self._vulnerability = vulnerability
        self._gateway = gateway
        self._ids = itertools.count()
        self._messages: List[ChatMessage] = []
        self._state = SessionState.IDLE
        self._closed = False
        self._observers: List[SessionObserver] = []

        self._append(MessageRole.SYSTEM, intro_message(vulnerability))
        logger.info(f"Started analysis session for {vulnerability.id}")

    @property
    def vulnerability(self) -> Vulnerability:
        return self._vulnerability

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def awaiting_reply(self) -> bool:
        return self._state is SessionState.AWAITING_REPLY

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def suggested_queries(self) -> tuple[str, ...]:
        """Preset prompts, offered only before the first exchange."""
        if len(self._messages) <= 1:
            return PRESET_QUERIES
        return ()

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register a callback invoked after every transition.

        Returns:
            A callable that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def submit(self, query: str) -> None:
        """Send an analyst query to the assistant.

        Blank queries, submissions while a reply is pending, and submissions
        to a closed session are ignored. Otherwise the analyst message is
        appended, the gateway is called once, and its reply (or an error
        notice) is appended before the session returns to idle.
        """
        if self._closed:
            logger.debug("Ignoring submit on closed session")
            return
        if not query or not query.strip():
            logger.debug("Ignoring blank query")
            return
        if self._state is SessionState.AWAITING_REPLY:
            logger.debug("Ignoring submit while a reply is pending")
            return

        self._append(MessageRole.ANALYST, query)
        self._set_state(SessionState.AWAITING_REPLY)

        reply = None
        try:
            reply = await self._gateway.ask(self._vulnerability, query)
        except Exception as e:
            logger.error(f"Assistant gateway failed for {self._vulnerability.id}: {e}")
            reply = GatewayReply(text=ERROR_NOTICE, ok=False)
        finally:
            # Cancelled while waiting: no reply message, but never stay stuck
            if reply is None and not self._closed:
                logger.info(f"Request cancelled for {self._vulnerability.id}")
                self._set_state(SessionState.IDLE)

        if self._closed:
            logger.info(f"Discarding reply for closed session on {self._vulnerability.id}")
            return

        if reply.ok:
            self._append(MessageRole.ASSISTANT, reply.text)
        else:
            self._append(MessageRole.SYSTEM, ERROR_NOTICE)
        self._set_state(SessionState.IDLE)

    def close(self) -> None:
        """Discard the session; a reply still in flight will be dropped."""
        if self._closed:
            return
        self._closed = True
        self._observers.clear()
        logger.info(f"Closed analysis session for {self._vulnerability.id}")

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            vulnerability_id=self._vulnerability.id,
            state=self._state.value,
            awaiting_reply=self.awaiting_reply,
            messages=list(self._messages),
            suggested_queries=list(self.suggested_queries),
        )

    def _append(self, role: MessageRole, content: str) -> None:
        self._messages.append(ChatMessage(id=next(self._ids), role=role, content=content))
        self._notify()

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        self._notify()

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception as e:
                logger.warning(f"Session observer failed: {e}")
