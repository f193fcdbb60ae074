"""
Reel - ConversationMemory
==========================
Append-only, in-process log of the current conversation: one entry for
each user query and one for each full assistant answer, in the order
they happened.

The log is unbounded and lives only as long as its owning session.
Nothing is persisted across process restarts.
"""

from __future__ import annotations

from reel.src.utils.logger import get_logger

logger = get_logger(__name__)


class ConversationMemory:
    """Chronological record of turn halves (query, answer, query, answer, …)."""

    __slots__ = ("_messages",)

    def __init__(self) -> None:
        self._messages: list[str] = []


    def add_message(self, text: str) -> None:
        """Append *text* with leading / trailing whitespace removed."""
        self._messages.append(text.strip())
        logger.debug("[MEMORY] %d message(s) recorded.", len(self._messages))


    def get_messages(self) -> list[str]:
        """Return a copy of the full history, oldest first."""
        return list(self._messages)


    def render(self) -> str:
        """Join the history into one newline-separated, trimmed block."""
        return "\n".join(self._messages).strip()


    def discard_last(self) -> str | None:
        """Remove and return the newest entry (``None`` when empty)."""
        if not self._messages:
            return None
        return self._messages.pop()


    def clear(self) -> None:
        self._messages.clear()


    def __len__(self) -> int:
        return len(self._messages)


    def __repr__(self) -> str:
        return f"ConversationMemory(messages={len(self._messages)})"
