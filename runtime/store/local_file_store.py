"""LocalFileStore: FileStore over the local filesystem.

Blocking pathlib / os calls are offloaded with ``asyncio.to_thread`` so the
event loop driving the log calls is never blocked by disk I/O.

Symbolic locations (``dataDirectory``, ``cacheDirectory``,
``tempDirectory``) are mapped to concrete paths taken from Settings; any
other location string is treated as a literal path.
"""

import asyncio
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from configs.settings import settings
from exceptions.exceptions import FileStoreIOError

from .file_store import AppendWriter, DirectoryHandle, FileHandle, PathLike


class LocalFileStore:
    """Local-disk implementation of the FileStore protocol.

    Parameters
    ----------
    locations:
        Mapping of symbolic location names to directories. Defaults to
        ``settings.symbolic_locations()``.
    create_missing:
        If True (default), a directory that does not exist yet is created
        on resolution. If False, resolving a missing directory fails.
    encoding:
        Text encoding used for appended log blocks.
    """

    def __init__(
        self,
        locations: Optional[Mapping[str, PathLike]] = None,
        create_missing: bool = True,
        encoding: str = "utf-8",
    ) -> None:
        if locations is None:
            locations = settings.symbolic_locations()
        self._locations: Dict[str, Path] = {
            name: Path(path) for name, path in locations.items()
        }
        self.create_missing = create_missing
        self.encoding = encoding

    def location_path(self, location: str) -> Path:
        """Return the concrete path for a symbolic location or literal path."""
        return self._locations.get(location, Path(location))

    # ------------------------------------------------------------------
    # FileStore protocol
    # ------------------------------------------------------------------

    async def resolve_directory(self, location: str) -> DirectoryHandle:
        path = self.location_path(location)

        def _resolve() -> Path:
            if not path.exists():
                if not self.create_missing:
                    raise FileNotFoundError(f"Directory does not exist: {path}")
                path.mkdir(parents=True, exist_ok=True)
            if not path.is_dir():
                raise NotADirectoryError(f"Not a directory: {path}")
            return path.resolve()

        resolved = await self._run("resolve_directory", path, _resolve)
        return DirectoryHandle(path=resolved, location=location)

    async def get_or_create_file(self, directory: DirectoryHandle, name: str) -> FileHandle:
        handle = FileHandle(directory=directory, name=name)
        # "a" creates the file when missing and never truncates it.
        await self._run("get_or_create_file", handle.path, lambda: handle.path.open("a").close())
        return handle

    async def file_size(self, file: FileHandle) -> int:
        return await self._run("file_size", file.path, lambda: file.path.stat().st_size)

    async def move_file(self, file: FileHandle, dest_dir: DirectoryHandle, new_name: str) -> FileHandle:
        dest = FileHandle(directory=dest_dir, name=new_name)
        # os.replace fully replaces an existing destination file.
        await self._run("move_file", file.path, lambda: os.replace(file.path, dest.path))
        return dest

    async def open_append_writer(self, file: FileHandle) -> AppendWriter:
        def _open() -> int:
            if not file.path.is_file():
                raise FileNotFoundError(f"No such file: {file.path}")
            return file.path.stat().st_size

        length = await self._run("open_append_writer", file.path, _open)
        return AppendWriter(file=file, length=length)

    async def write(self, writer: AppendWriter, text: str) -> None:
        data = text.encode(self.encoding)

        def _append() -> None:
            with writer.file.path.open("ab") as f:
                f.write(data)

        await self._run("write", writer.file.path, _append)
        writer.length += len(data)
        writer.writes += 1

    async def remove_file(self, path: PathLike, missing_ok: bool = False) -> None:
        target = Path(path)
        await self._run("remove_file", target, lambda: target.unlink(missing_ok=missing_ok))

    # ------------------------------------------------------------------
    # Extras (not part of the protocol)
    # ------------------------------------------------------------------

    async def read_text(self, file: FileHandle) -> Optional[str]:
        """Return the file's text content, or None if it does not exist."""

        def _read() -> Optional[str]:
            if not file.path.is_file():
                return None
            return file.path.read_text(encoding=self.encoding)

        return await self._run("read_text", file.path, _read)

    async def _run(self, operation: str, path: Path, func):
        try:
            return await asyncio.to_thread(func)
        except OSError as e:
            raise FileStoreIOError(operation, path, e) from e
