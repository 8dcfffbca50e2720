from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Message

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger("ark_chat")


class Transcript:
    """Ordered conversation history sent as context with every request.

    Append-only during a turn; ``rollback_last`` exists solely to undo the
    provisional user message of a failed turn. Between turns the history is
    either empty or ends with a ``(user, assistant)`` pair.
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = list(messages)

    def append(self, message: Message) -> None:
        if not isinstance(message, Message):
            raise TypeError(f"expected Message, got {type(message).__name__}")
        self._messages.append(message)

    def add(self, role: str, content: str) -> Message:
        """Build a ``Message`` from ``role``/``content`` and append it."""
        message = Message(role=role, content=content)
        self.append(message)
        return message

    def clear(self) -> None:
        logger.debug("[ArkChat] Clearing transcript of %d messages.", len(self._messages))
        self._messages = []

    def rollback_last(self) -> Message:
        if not self._messages:
            raise IndexError("rollback_last() on an empty transcript")
        return self._messages.pop()

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def is_paired(self) -> bool:
        """True when the history is empty or ends with a completed exchange."""
        if not self._messages:
            return True
        if len(self._messages) < 2:
            return False
        return self._messages[-2].role == "user" and self._messages[-1].role == "assistant"

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __repr__(self) -> str:
        return f"Transcript(messages={len(self._messages)})"
