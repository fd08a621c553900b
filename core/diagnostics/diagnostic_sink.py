"""Rate-limited sink for writer failure diagnostics.

Flush failures are reported here instead of through LogDispatcher.error():
routing them back into the buffer would trigger another flush against the
same broken store, and so on. The sink writes straight to a stdlib logger,
emits at most one record per interval and counts what it suppressed.
"""

import logging
import time
from typing import Callable, Optional


class DiagnosticSink:
    """Non-buffered, rate-limited reporter for internal failures.

    Parameters
    ----------
    interval:
        Minimum number of seconds between two emitted records. ``0``
        disables rate limiting.
    logger:
        Target logger; defaults to ``rolling_log.diagnostics``.
    clock:
        Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        interval: float = 30.0,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self.logger = logger or logging.getLogger("rolling_log.diagnostics")
        self._clock = clock
        self._last_emit: Optional[float] = None
        self.suppressed = 0

    def report(self, message: str, error: Optional[BaseException] = None) -> bool:
        """Report a failure; returns True if a record was emitted."""
        now = self._clock()
        if (
            self._last_emit is not None
            and self.interval > 0
            and now - self._last_emit < self.interval
        ):
            self.suppressed += 1
            return False

        suffix = ""
        if self.suppressed:
            suffix = f" ({self.suppressed} similar failure(s) suppressed)"
        if error is not None:
            self.logger.error("[DIAG] %s: %s%s", message, error, suffix)
        else:
            self.logger.error("[DIAG] %s%s", message, suffix)

        self._last_emit = now
        self.suppressed = 0
        return True
