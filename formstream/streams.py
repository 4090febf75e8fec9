"""
Byte streams backing part contents and built bodies.

Every stream answers three questions the multipart builder asks: how big it
is, where it came from, and what its full content is.
"""

from __future__ import annotations

import io
import os
import stat
from collections.abc import Iterable, Iterator
from typing import IO, Any

from formstream.errors import StreamConsumedError, StreamError

# Location reported by streams that do not live on disk.
EPHEMERAL_PREFIX = "memory://"


def _to_bytes(chunk: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


class Stream:
    """Base class for readable byte sources."""

    def size(self) -> int | None:
        raise NotImplementedError

    def source_location(self) -> str | None:
        return None

    def seekable(self) -> bool:
        return False

    def read_all(self) -> bytes:
        raise NotImplementedError


class BytesStream(Stream):
    """In-memory stream over a fixed byte string."""

    def __init__(self, data: bytes | bytearray | memoryview | str = b"") -> None:
        self._data = _to_bytes(data)

    def size(self) -> int | None:
        return len(self._data)

    def source_location(self) -> str | None:
        return EPHEMERAL_PREFIX

    def seekable(self) -> bool:
        return True

    def read_all(self) -> bytes:
        return self._data

    def __repr__(self) -> str:
        return f"<BytesStream {len(self._data)} bytes>"


class FileStream(Stream):
    """
    Stream over an open file-like object.

    Seekable handles are rewound before every read so a stream can be read
    more than once. Handles that cannot seek are read once; a second read
    raises StreamConsumedError.
    """

    def __init__(self, fileobj: IO[Any]) -> None:
        if not hasattr(fileobj, "read"):
            raise StreamError(f"Object of type {type(fileobj).__name__} is not readable")
        if getattr(fileobj, "closed", False):
            raise StreamError("Cannot create a stream from a closed file")
        self._fileobj = fileobj
        self._consumed = False

    def seekable(self) -> bool:
        try:
            return bool(self._fileobj.seekable())
        except (AttributeError, ValueError, OSError):
            return False

    def size(self) -> int | None:
        if isinstance(self._fileobj, io.BytesIO):
            return len(self._fileobj.getvalue())
        if isinstance(self._fileobj, io.StringIO):
            return len(self._fileobj.getvalue().encode("utf-8"))
        # Decoding and newline translation make the on-disk size unreliable.
        if isinstance(self._fileobj, io.TextIOBase):
            return None
        if self.seekable():
            pos = self._fileobj.tell()
            try:
                return self._fileobj.seek(0, io.SEEK_END)
            finally:
                self._fileobj.seek(pos)
        try:
            info = os.fstat(self._fileobj.fileno())
        except (AttributeError, ValueError, OSError):
            return None
        # Pipes and sockets report a meaningless size.
        if not stat.S_ISREG(info.st_mode):
            return None
        return info.st_size

    def source_location(self) -> str | None:
        if isinstance(self._fileobj, (io.BytesIO, io.StringIO)):
            return EPHEMERAL_PREFIX
        name = getattr(self._fileobj, "name", None)
        if isinstance(name, bytes):
            name = os.fsdecode(name)
        # Pseudo names such as "<stdin>" are not paths.
        if not isinstance(name, str) or not name or name.startswith("<"):
            return None
        return name

    def read_all(self) -> bytes:
        if self.seekable():
            self._fileobj.seek(0)
        elif self._consumed:
            raise StreamConsumedError("Stream is not seekable and was already read")
        data = self._fileobj.read()
        self._consumed = True
        return _to_bytes(data)

    def __repr__(self) -> str:
        return f"<FileStream {self.source_location() or type(self._fileobj).__name__}>"


class PathStream(Stream):
    """
    Stream over a file named by path.

    The file is opened only for the duration of each size or read call, so
    no handle outlives the call.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = os.fspath(path)
        try:
            with open(self._path, "rb"):
                pass
        except OSError as exc:
            raise StreamError(f"Cannot open {self._path!r}: {exc}") from exc

    def size(self) -> int | None:
        try:
            info = os.stat(self._path)
        except OSError:
            return None
        if not stat.S_ISREG(info.st_mode):
            return None
        return info.st_size

    def source_location(self) -> str | None:
        return self._path

    def seekable(self) -> bool:
        return True

    def read_all(self) -> bytes:
        try:
            with open(self._path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            raise StreamError(f"Cannot read {self._path!r}: {exc}") from exc

    def __repr__(self) -> str:
        return f"<PathStream {self._path}>"


class IteratorStream(Stream):
    """Single-use stream over an iterable of chunks. Its size is unknown."""

    def __init__(self, chunks: Iterable[bytes | str]) -> None:
        self._chunks: Iterator[bytes | str] = iter(chunks)
        self._consumed = False

    def size(self) -> int | None:
        return None

    def read_all(self) -> bytes:
        if self._consumed:
            raise StreamConsumedError("Iterator stream was already read")
        self._consumed = True
        try:
            return b"".join(_to_bytes(chunk) for chunk in self._chunks)
        except TypeError as exc:
            raise StreamError(f"Iterator yielded a non-bytes chunk: {exc}") from exc

    def __repr__(self) -> str:
        return f"<IteratorStream consumed={self._consumed}>"


class StreamFactory:
    """Turns the resources callers hand to the builder into Stream objects."""

    def create_stream(self, resource: Any = b"") -> Stream:
        """
        Wrap `resource` in a Stream.

        Args:
            resource: An existing Stream, bytes-like data, text, a number, None,
                a filesystem path, an open file object, or an iterable of chunks.

        Returns:
            A Stream over the resource.

        Raises:
            StreamError: If the resource type is unsupported or cannot be opened.
        """
        if isinstance(resource, Stream):
            return resource
        if resource is None:
            return BytesStream(b"")
        if isinstance(resource, (bytes, bytearray, memoryview, str)):
            return BytesStream(resource)
        if isinstance(resource, bool):
            raise StreamError("Cannot create a stream from a bool")
        if isinstance(resource, (int, float)):
            return BytesStream(str(resource))
        if isinstance(resource, os.PathLike):
            return PathStream(resource)
        if hasattr(resource, "read"):
            return FileStream(resource)
        if isinstance(resource, Iterable) and not isinstance(resource, dict):
            return IteratorStream(resource)
        raise StreamError(f"Cannot create a stream from {type(resource).__name__}")
