"""FileStore: the asynchronous storage primitives the writer depends on.

The RotatingWriter never touches the filesystem directly. Every operation
goes through an object implementing the FileStore protocol below, which
keeps the flush/rotation logic independent of where files actually live
(local disk, a sandboxed app directory, an in-memory fake in tests).

Every primitive is a coroutine, so each request completes exactly once,
either with a value or with a FileStoreIOError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Union

PathLike = Union[str, Path]


@dataclass(frozen=True)
class DirectoryHandle:
    """A resolved storage directory."""

    path: Path
    location: str = ""   # symbolic name it was resolved from, if any


@dataclass(frozen=True)
class FileHandle:
    """A file inside a resolved directory."""

    directory: DirectoryHandle
    name: str

    @property
    def path(self) -> Path:
        return self.directory.path / self.name


@dataclass
class AppendWriter:
    """Writer positioned at end-of-file of ``file``.

    ``length`` is the file size when the writer was opened and grows with
    every successful write.
    """

    file: FileHandle
    length: int = 0
    writes: int = field(default=0)


class FileStore(Protocol):
    """
    Abstract storage interface consumed by the RotatingWriter.

    Implementations raise FileStoreIOError for every failure; the writer
    does not interpret platform-specific errors.
    """

    async def resolve_directory(self, location: str) -> DirectoryHandle:
        """Resolve a symbolic location (or literal path) to a directory."""
        ...

    async def get_or_create_file(self, directory: DirectoryHandle, name: str) -> FileHandle:
        """Return the named file, creating it empty if it does not exist."""
        ...

    async def file_size(self, file: FileHandle) -> int:
        """Return the size of the file in bytes."""
        ...

    async def move_file(self, file: FileHandle, dest_dir: DirectoryHandle, new_name: str) -> FileHandle:
        """Move/rename a file, returning a handle to the destination."""
        ...

    async def open_append_writer(self, file: FileHandle) -> AppendWriter:
        """Open a writer positioned at the end of the file."""
        ...

    async def write(self, writer: AppendWriter, text: str) -> None:
        """Append text through the writer."""
        ...

    async def remove_file(self, path: PathLike) -> None:
        """Delete a file by path."""
        ...
