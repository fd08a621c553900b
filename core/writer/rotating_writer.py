"""RotatingWriter: flushes the log buffer to disk, rotating between two files.

Files per prefix:
- ``<prefix>.0``: current file, appended on every flush
- ``<prefix>.1``: previous file, written once per rotation by moving the
  current file over it (an existing previous file is fully replaced)

Flush algorithm:
1. get (or create) the current file
2. query its size
3. if size > logSize: move current -> previous, create a fresh current file
   (at most one rotation per flush, never mid-write)
4. open an append writer on the current file
5. drain the buffer into one text block, each entry preceded by a newline
6. write the block
7. success: drained entries are gone, state back to IDLE
8. failure: drained entries are restored at the front of the buffer,
   state back to IDLE so a later trigger can retry

The WriterState flag is the only gate between flushes. Callers claim it
with begin() before scheduling run(); flush() does both in one call.
"""

import asyncio
import logging
from typing import Optional

from exceptions.exceptions import ConfigurationError, FlushRejectedError
from runtime.models.config_models import LogConfig
from runtime.models.log_models import FlushResult, WriterState
from runtime.store.file_store import DirectoryHandle, FileStore

from core.buffer.log_buffer import LogBuffer


logger = logging.getLogger(__name__)


class RotatingWriter:
    """Flush/rotation engine.

    Parameters
    ----------
    file_store:
        FileStore used for every I/O step. ``None`` means the platform has
        no file capability; the writer then stays DEGRADED forever.
    """

    def __init__(self, file_store: Optional[FileStore]) -> None:
        self.file_store = file_store
        self.directory: Optional[DirectoryHandle] = None
        self.state = WriterState.DEGRADED

    @property
    def started(self) -> bool:
        return self.state is WriterState.IDLE

    async def start(self, location: str) -> DirectoryHandle:
        """Resolve the log directory and leave DEGRADED mode.

        Raises
        ------
        ConfigurationError
            If no file store is available.
        FileStoreIOError
            If the store cannot resolve the location.
        """
        if self.file_store is None:
            self._lose_directory()
            raise ConfigurationError("No file store available on this platform.")

        try:
            directory = await self.file_store.resolve_directory(location)
        except Exception:
            self._lose_directory()
            raise

        self.directory = directory
        if self.state is not WriterState.FLUSHING:
            self.state = WriterState.IDLE
        logger.debug("[WRITER] Log directory resolved: %s", directory.path)
        return directory

    def begin(self) -> bool:
        """Claim the writer for one flush. Returns False unless IDLE."""
        if self.state is not WriterState.IDLE:
            return False
        self.state = WriterState.FLUSHING
        return True

    async def flush(self, buffer: LogBuffer, config: LogConfig) -> FlushResult:
        """Claim the writer and flush, or report why that is not possible."""
        if self.state is WriterState.DEGRADED or self.directory is None:
            return FlushResult.failure(ConfigurationError())
        if not self.begin():
            return FlushResult.failure(FlushRejectedError(self.state))
        return await self.run(buffer, config)

    async def run(self, buffer: LogBuffer, config: LogConfig) -> FlushResult:
        """Perform a flush previously claimed with begin().

        ``config`` should be a snapshot; it is read several times across
        suspension points.
        """
        store = self.file_store
        directory = self.directory
        drained = []
        rotated = False
        try:
            if store is None or directory is None:
                return FlushResult.failure(ConfigurationError())
            if not buffer:
                return FlushResult.success()

            current = await store.get_or_create_file(directory, config.current_name)
            size = await store.file_size(current)
            if size > config.log_size:
                logger.info(
                    "[WRITER] Log is over capacity (%d > %d bytes). Moving old log to %s",
                    size,
                    config.log_size,
                    config.previous_name,
                )
                await store.move_file(current, directory, config.previous_name)
                current = await store.get_or_create_file(directory, config.current_name)
                rotated = True

            writer = await store.open_append_writer(current)

            drained = buffer.drain()
            block = "".join("\n" + entry.to_line() for entry in drained)
            await store.write(writer, block)
        except asyncio.CancelledError:
            buffer.restore(drained)
            raise
        except Exception as e:
            buffer.restore(drained)
            logger.debug(
                "[WRITER] Flush failed; %d entries kept for next time: %s",
                len(drained),
                e,
            )
            return FlushResult.failure(e)
        finally:
            self._settle()

        logger.debug(
            "[WRITER] Wrote %d entries to %s (rotated=%s)",
            len(drained),
            config.current_name,
            rotated,
        )
        return FlushResult.success(written=len(drained), rotated=rotated)

    def _settle(self) -> None:
        self.state = WriterState.IDLE if self.directory is not None else WriterState.DEGRADED

    def _lose_directory(self) -> None:
        self.directory = None
        if self.state is not WriterState.FLUSHING:
            self.state = WriterState.DEGRADED
