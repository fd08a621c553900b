"""
Custom exceptions for the rolling log writer.

These exceptions are intentionally simple and descriptive.
They are used across:

  - runtime/store/       (file store failures)
  - core/writer/         (flush preconditions)
  - core/dispatcher/     (startup and immediate-flush outcomes)

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules.
"""


class RollingLogError(Exception):
    """Base class for every error raised by the rolling log writer."""


class ConfigurationError(RollingLogError):
    """
    Raised when a flush is attempted before a log directory was resolved.

    This usually means start() was never called, or it failed and the
    writer is still running in degraded (memory-only) mode.
    """

    def __init__(self, details=None):
        self.details = details or "No log directory has been resolved."
        super().__init__(self.details)


class FileStoreIOError(RollingLogError, OSError):
    """
    Raised when a file store primitive fails.

    The exception keeps the name of the failing operation and the path it
    was working on, so that flush failures can be reported precisely.

    Example:
        FileStoreIOError("move_file", "/data/logs/log.0", cause)
    """

    def __init__(self, operation, path=None, cause=None):
        self.operation = operation
        self.path = str(path) if path is not None else None
        self.cause = cause
        msg = f"File store operation '{operation}' failed"
        if self.path:
            msg += f" for {self.path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class DegradedModeError(RollingLogError):
    """
    Raised by start() when the log directory cannot be resolved.

    Logging keeps working in memory only; nothing is persisted until a
    later start() succeeds.
    """

    def __init__(self, cause=None):
        self.cause = cause
        msg = "Rolling logger unable to start; no file logging during this session"
        if cause is not None:
            msg += f" ({cause})"
        super().__init__(msg)


class FlushRejectedError(RollingLogError):
    """
    Raised (or reported) when an immediate flush request cannot run because
    the writer is not idle.

    Requests are rejected rather than queued: a flush already in flight
    will pick up every entry buffered in the meantime on the next trigger.
    """

    def __init__(self, state):
        self.state = state
        state_name = getattr(state, "value", state)
        super().__init__(f"Flush rejected: writer is {state_name}")
