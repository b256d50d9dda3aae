"""
Payload history buffer.

Ordered, optionally bounded record of fired payloads. A channel replays this
record to listeners that opt in at subscription time.
"""

from collections import deque
from typing import Generic

from eventchannel.config import HistoryMode
from eventchannel.exceptions import EmptyHistoryError
from eventchannel.types import P


class HistoryBuffer(Generic[P]):
    """
    History of payloads in fire order with FIFO eviction.

    The buffer has three modes, selected by ``limit``:
    - negative: disabled, appends are ignored
    - 0: unbounded
    - positive: keeps only the ``limit`` most recent payloads

    Example:
        >>> history = HistoryBuffer[str](limit=2, owner="name")
        >>> for value in ("a", "b", "c"):
        ...     history.append(value)
        >>> history.snapshot()
        ('b', 'c')
    """

    def __init__(self, limit: int = -1, owner: str = "event") -> None:
        """
        Initialize an empty history buffer.

        Args:
            limit: History limit (see class docstring)
            owner: Name of the owning channel, used in error messages
        """
        self._limit = limit
        self._owner = owner
        self._mode = HistoryMode.from_limit(limit)
        self._entries: deque[P] = deque(maxlen=limit if limit > 0 else None)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def mode(self) -> HistoryMode:
        return self._mode

    @property
    def enabled(self) -> bool:
        """True unless the buffer is disabled."""
        return self._mode is not HistoryMode.DISABLED

    def append(self, payload: P) -> bool:
        """
        Record a payload, evicting the oldest entry past the limit.

        Args:
            payload: Payload to record

        Returns:
            True if the payload was recorded, False if history is disabled
        """
        if not self.enabled:
            return False
        self._entries.append(payload)
        return True

    def snapshot(self) -> tuple[P, ...]:
        """Return an immutable copy of the entries in fire order."""
        return tuple(self._entries)

    @property
    def last(self) -> P:
        """
        Most recent payload.

        Raises:
            EmptyHistoryError: If no payload is recorded
        """
        if not self._entries:
            raise EmptyHistoryError(self._owner)
        return self._entries[-1]

    def clear(self) -> None:
        """Remove all recorded payloads."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HistoryBuffer(mode={self._mode.value}, limit={self._limit}, length={len(self)})"


__all__ = ["HistoryBuffer"]
