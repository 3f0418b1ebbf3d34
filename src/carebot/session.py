"""Interaction loop: one chat session driven by a single asyncio event loop."""
from __future__ import annotations

import asyncio
import logging
import uuid
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Set

from .messages import ASSISTANT, USER
from .responder import respond
from .store import Clock, ConversationStore

logger = logging.getLogger(__name__)

DEFAULT_TYPING_DELAY = 1.0

Listener = Callable[["ChatSession"], None]
Responder = Callable[[str], str]


class ChatSession:
    """Owns the conversation store, the input buffer and the typing flag.

    Every accepted submission schedules exactly one delayed reply task. Reply
    tasks are never cancelled by the session; :meth:`drain` waits for all of
    them.
    """

    def __init__(
        self,
        *,
        session_id: Optional[str] = None,
        delay: float = DEFAULT_TYPING_DELAY,
        responder: Responder = respond,
        store: Optional[ConversationStore] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex[:12]
        self.delay = max(0.0, float(delay))
        self.store = store or ConversationStore(clock=clock)
        self.input = ""
        self._respond = responder
        self._outstanding = 0
        self._pending: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    # --------- state ----------
    @property
    def typing(self) -> bool:
        return self.store.typing

    @property
    def messages(self):
        return self.store.messages

    @property
    def pending(self) -> int:
        return self._outstanding

    def set_input(self, text: str) -> None:
        self.input = text

    # --------- view notification ----------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("session %s: view listener failed", self.id)

    # --------- interaction ----------
    def submit(self, text: Optional[str] = None) -> Optional[asyncio.Task]:
        """Submit ``text`` (or the input buffer when omitted).

        Blank input is ignored and returns None. Otherwise the user message is
        appended right away and the task producing the reply is returned.
        Must be called from inside a running event loop.
        """
        if text is None:
            text = self.input
        if not text or not text.strip():
            return None

        loop = asyncio.get_running_loop()

        self.store.append(USER, text)
        self.input = ""
        self._outstanding += 1
        self.store.typing = True
        self._notify()

        task = loop.create_task(self._reply_later(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _reply_later(self, text: str) -> None:
        try:
            await asyncio.sleep(self.delay)
            reply = self._respond(text)
            self.store.append(ASSISTANT, reply)
        finally:
            self._outstanding -= 1
            # Stays on while a later submission is still waiting for its reply.
            self.store.typing = self._outstanding > 0
            self._notify()

    async def drain(self) -> None:
        """Wait until every scheduled reply has been appended."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def snapshot(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "typing": self.typing,
            "messages": [m.to_dict() for m in self.store.messages],
        }

    def reply_tasks(self) -> Set[asyncio.Task]:
        """Reply tasks that have not finished yet."""
        return set(self._pending)


DEFAULT_MAX_SESSIONS = 500


class SessionRegistry:
    """Page sessions keyed by id. Each session has its own store.

    At most ``max_sessions`` are kept; creating one more evicts the session
    that was used least recently. Replies still pending in a dropped or
    evicted session are tracked until they finish, so :meth:`drain_all`
    waits for them too.
    """

    def __init__(
        self,
        *,
        delay: float = DEFAULT_TYPING_DELAY,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        responder: Responder = respond,
        clock: Optional[Clock] = None,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.delay = delay
        self.max_sessions = max_sessions
        self._responder = responder
        self._clock = clock
        self._sessions: "OrderedDict[str, ChatSession]" = OrderedDict()
        self._detached: Set[asyncio.Task] = set()

    def create(self) -> ChatSession:
        while len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            logger.info("session %s evicted (limit %d)", oldest, self.max_sessions)
            self.drop(oldest)
        session = ChatSession(delay=self.delay, responder=self._responder, clock=self._clock)
        self._sessions[session.id] = session
        logger.info("session %s started (%d active)", session.id, len(self._sessions))
        return session

    def get(self, session_id: str) -> ChatSession:
        """Return the session or raise KeyError. Marks it as recently used."""
        session = self._sessions[session_id]
        self._sessions.move_to_end(session_id)
        return session

    def drop(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        for task in session.reply_tasks():
            self._detached.add(task)
            task.add_done_callback(self._detached.discard)
        logger.info("session %s closed (%d active)", session_id, len(self._sessions))
        return True

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def detached(self) -> int:
        return len(self._detached)

    async def drain_all(self) -> None:
        for session in list(self._sessions.values()):
            await session.drain()
        while self._detached:
            await asyncio.gather(*list(self._detached))
