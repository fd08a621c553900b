"""LogBuffer: ordered in-memory queue of entries waiting to be flushed.

The buffer is owned by the LogDispatcher (which appends) and drained by the
RotatingWriter during a flush. Entries appended while a flush is writing
stay behind the drained ones; if the write fails, the drained entries are
put back in front of them so the FIFO order is preserved.
"""

from collections import deque
from typing import Deque, Iterator, List, Sequence

from runtime.models.log_models import LogEntry


class LogBuffer:
    """FIFO of LogEntry objects, unbounded until flushed."""

    def __init__(self) -> None:
        self._entries: Deque[LogEntry] = deque()

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def drain(self) -> List[LogEntry]:
        """Remove and return every buffered entry, oldest first."""
        drained = list(self._entries)
        self._entries.clear()
        return drained

    def restore(self, entries: Sequence[LogEntry]) -> None:
        """Put previously drained entries back at the front, as one unit."""
        self._entries.extendleft(reversed(entries))

    def snapshot(self) -> List[LogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    def __bool__(self) -> bool:
        return bool(self._entries)
