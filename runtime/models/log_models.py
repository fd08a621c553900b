"""
Log-related models for the rolling log runtime.

These describe:
- LogLevel enum (log, info, error, debug)
- LogEntry: one normalized, timestamped record waiting in the buffer
- WriterState enum (IDLE, FLUSHING, DEGRADED)
- FlushResult: outcome of a single flush attempt
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LogLevel(str, Enum):
    LOG = "log"
    INFO = "info"
    ERROR = "error"
    DEBUG = "debug"


class WriterState(str, Enum):
    IDLE = "IDLE"
    FLUSHING = "FLUSHING"
    DEGRADED = "DEGRADED"


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str     # ISO8601, captured when the log call was made
    level: LogLevel
    message: str       # already converted to text

    def to_line(self) -> str:
        """Render the entry as it is stored in the log file.

        The plain ``log`` level carries no label; every other level is
        appended as `` - LEVEL`` after the timestamp.
        """
        if self.level is LogLevel.LOG:
            label = ""
        else:
            label = f" - {self.level.value.upper()}"
        return f"{self.timestamp}{label}: {self.message}"


@dataclass
class FlushResult:
    """Structured result of a flush attempt."""

    ok: bool
    written: int = 0
    rotated: bool = False
    error: Optional[Exception] = None

    @property
    def reason(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__

    @classmethod
    def success(cls, written: int = 0, rotated: bool = False) -> "FlushResult":
        return cls(ok=True, written=written, rotated=rotated)

    @classmethod
    def failure(cls, error: Exception) -> "FlushResult":
        return cls(ok=False, error=error)
