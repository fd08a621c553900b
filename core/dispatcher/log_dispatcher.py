"""LogDispatcher: public entry point of the rolling log writer.

Responsible for:
- normalizing log/info/error/debug calls into timestamped entries
- mirroring entries to the console logger when ``console`` is enabled
- appending every entry to the LogBuffer
- deciding when a flush is requested:
    writer IDLE and (level is error or buffer length > eventBuffer)
- starting the writer (directory resolution) and the pause hook

Log calls never block and never raise. A flush runs as an asyncio task on
the running loop; while it is in flight new entries just accumulate.
Flush failures are reported through the DiagnosticSink, never back
through error(), so a broken store cannot feed itself more flushes.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional

from exceptions.exceptions import DegradedModeError, FlushRejectedError
from runtime.lifecycle.pause_hook import PauseHook, PauseSignal
from runtime.models.config_models import LogConfig
from runtime.models.log_models import FlushResult, LogEntry, LogLevel, WriterState
from runtime.store.file_store import DirectoryHandle

from core.buffer.log_buffer import LogBuffer
from core.diagnostics.diagnostic_sink import DiagnosticSink
from core.writer.rotating_writer import RotatingWriter

from .entry_formatter import build_entry


logger = logging.getLogger(__name__)
console_logger = logging.getLogger("rolling_log.console")

_CONSOLE_LEVELS = {
    LogLevel.LOG: logging.INFO,
    LogLevel.INFO: logging.INFO,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.DEBUG: logging.DEBUG,
}


class LogDispatcher:
    """Buffered, rotating file logger.

    Parameters
    ----------
    writer:
        RotatingWriter that owns the writer state and performs flushes.
    config:
        Live configuration; defaults to ``LogConfig()``.
    buffer:
        Buffer of pending entries; a fresh one is created if omitted.
    diagnostics:
        Sink for flush failures; defaults to a DiagnosticSink with its
        default interval.
    pause_signal:
        Optional host pause signal. When given, ``writeOnPause`` controls
        whether the dispatcher is subscribed to it.
    """

    def __init__(
        self,
        writer: RotatingWriter,
        config: Optional[LogConfig] = None,
        buffer: Optional[LogBuffer] = None,
        diagnostics: Optional[DiagnosticSink] = None,
        pause_signal: Optional[PauseSignal] = None,
    ) -> None:
        self.writer = writer
        self.config = config if config is not None else LogConfig()
        self.buffer = buffer if buffer is not None else LogBuffer()
        self.diagnostics = diagnostics or DiagnosticSink()
        self.pause_hook: Optional[PauseHook] = None
        if pause_signal is not None:
            self.pause_hook = PauseHook(pause_signal, self._on_pause)
        self._flush_task: Optional["asyncio.Task[FlushResult]"] = None

        self._sync_pause_hook()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> WriterState:
        return self.writer.state

    @property
    def started(self) -> bool:
        return self.writer.started

    # ------------------------------------------------------------------
    # Configuration / startup
    # ------------------------------------------------------------------

    def set_config(self, options: Optional[Mapping[str, Any]] = None) -> LogConfig:
        """Update recognized options and return the live config."""
        changed = self.config.update(options)
        if "write_on_pause" in changed or self._pause_hook_out_of_sync():
            self._sync_pause_hook()
        return self.config

    async def start(self) -> DirectoryHandle:
        """Resolve the configured directory so flushes can happen.

        On failure the dispatcher stays (or falls back) in DEGRADED mode:
        log calls keep buffering in memory, no flush is ever requested, and
        DegradedModeError is raised to the caller of start().
        """
        # A subscription that failed outside an event loop can succeed now.
        self._sync_pause_hook()

        location = self.config.directory
        self.debug(f"Setting location to file directory: {location}")
        try:
            directory = await self.writer.start(location)
        except Exception as e:
            self.debug(str(e))
            self.error("No file logging during this session")
            raise DegradedModeError(e) from e

        self.debug("Location set!")
        self.debug(str(directory.path))
        return directory

    async def close(self) -> Optional[FlushResult]:
        """Unsubscribe from pause events and write out whatever is buffered."""
        if self.pause_hook is not None:
            self.pause_hook.disable()
        await self.pending_flush()
        if self.writer.state is WriterState.IDLE and self.buffer:
            return await self.write_now()
        return None

    # ------------------------------------------------------------------
    # Log calls
    # ------------------------------------------------------------------

    def log(self, msg: Any) -> None:
        self._record(LogLevel.LOG, msg)

    def info(self, msg: Any) -> None:
        self._record(LogLevel.INFO, msg)

    def error(self, msg: Any) -> None:
        self._record(LogLevel.ERROR, msg)

    def debug(self, msg: Any) -> None:
        self._record(LogLevel.DEBUG, msg)

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------

    async def write_now(self) -> FlushResult:
        """Flush immediately, disregarding eventBuffer.

        Rejected (not queued) when the writer is FLUSHING or DEGRADED.
        """
        if not self.writer.begin():
            return FlushResult.failure(FlushRejectedError(self.writer.state))
        self.debug("Writing changes to log file")
        task = self._spawn_flush()
        return await task

    async def pending_flush(self) -> Optional[FlushResult]:
        """Wait for the most recent flush task, if any, and return its result."""
        task = self._flush_task
        if task is None:
            return None
        return await task

    def request_flush(self) -> bool:
        """Start a flush in the background if the writer is IDLE.

        Returns True if a flush task was scheduled.
        """
        if self.writer.state is not WriterState.IDLE:
            return False
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("[DISPATCH] No running event loop; flush deferred")
            return False
        if not self.writer.begin():
            return False
        self._spawn_flush()
        return True

    def _spawn_flush(self) -> "asyncio.Task[FlushResult]":
        # The writer must already be claimed; the snapshot pins the
        # rotation threshold and file names for this flush.
        snapshot = self.config.snapshot()
        task = asyncio.get_running_loop().create_task(self._run_flush(snapshot))
        self._flush_task = task
        return task

    async def _run_flush(self, config: LogConfig) -> FlushResult:
        result = await self.writer.run(self.buffer, config)
        if not result.ok:
            self.diagnostics.report(
                "Error writing to log file; entries kept for next time",
                result.error,
            )
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record(self, level: LogLevel, msg: Any) -> None:
        try:
            entry = build_entry(level, msg)
            self._mirror(entry)
            self.buffer.append(entry)
            if level is LogLevel.ERROR or len(self.buffer) > self.config.event_buffer:
                self.request_flush()
        except Exception:
            logger.exception("[DISPATCH] Failed to record %s entry", level.value)

    def _mirror(self, entry: LogEntry) -> None:
        if not self.config.console:
            return
        if entry.level is LogLevel.DEBUG and not self.config.debug:
            return
        console_logger.log(_CONSOLE_LEVELS[entry.level], "%s", entry.message)

    def _on_pause(self) -> None:
        if self.writer.state is not WriterState.IDLE:
            self.debug("App pausing")
            logger.debug(
                "[DISPATCH] Pause flush rejected: writer is %s",
                self.writer.state.value,
            )
            return
        self.debug("App pausing")
        # Recording the entry may itself have crossed eventBuffer.
        if self.writer.state is WriterState.IDLE:
            self.request_flush()

    def _pause_hook_out_of_sync(self) -> bool:
        if self.pause_hook is None:
            return False
        return self.config.write_on_pause != self.pause_hook.enabled

    def _sync_pause_hook(self) -> None:
        if self.pause_hook is None:
            return
        try:
            if self.config.write_on_pause:
                self.pause_hook.enable()
            else:
                self.pause_hook.disable()
        except (RuntimeError, ValueError, NotImplementedError) as e:
            logger.warning("[DISPATCH] Could not update pause subscription: %s", e)
