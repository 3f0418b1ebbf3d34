"""In-memory conversation store for one chat session (append-only)."""
from __future__ import annotations

import io
import itertools
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Tuple

from .messages import ASSISTANT, Message
from .responder import WELCOME_MESSAGE

WELCOME_ID = "welcome"

Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


class ConversationStore:
    """Ordered message list plus the typing flag.

    Layout:
        messages[0]   # seeded assistant welcome, id "welcome"
        messages[1:]  # user/assistant turns in creation order

    Messages are only ever appended; :attr:`messages` hands out a tuple so
    callers cannot reorder or drop entries.
    """

    def __init__(
        self,
        *,
        welcome: str = WELCOME_MESSAGE,
        clock: Optional[Clock] = None,
    ) -> None:
        self._clock: Clock = clock or _local_now
        self._ids = itertools.count(1)
        self._messages: List[Message] = [
            Message(id=WELCOME_ID, role=ASSISTANT, content=welcome, timestamp=self._clock())
        ]
        self.typing = False

    # --------- core API ----------
    def append(self, role: str, content: str) -> Message:
        """Create a message stamped with the current time and append it."""
        msg = Message(
            id=str(next(self._ids)),
            role=role,
            content=content,
            timestamp=self._clock(),
        )
        self._messages.append(msg)
        return msg

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    # --------- convenience ----------
    def last(self) -> Message:
        return self._messages[-1]

    def export_text(self) -> str:
        """Plain-text transcript, one ``[time] role: content`` block per message."""
        buf = io.StringIO()
        for m in self._messages:
            buf.write(f"[{m.time}] {m.role}: {m.content.strip()}\n")
        return buf.getvalue()
