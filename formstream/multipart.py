from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Mapping
from typing import Any

from formstream.errors import ConfigurationError
from formstream.headers import HeaderList, HeadersInput
from formstream.mimetype import MimetypeHelper, default_helper
from formstream.streams import EPHEMERAL_PREFIX, Stream, StreamFactory

logger = logging.getLogger(__name__)


class Part:
    """One named field of a multipart body."""

    def __init__(
        self,
        name: str,
        contents: Stream,
        headers: HeaderList,
        filename: str | None = None,
    ) -> None:
        self.name = name
        self.contents = contents
        self.headers = headers
        self.filename = filename

    def __repr__(self) -> str:
        return f"<Part {self.name!r} filename={self.filename!r}>"


def _choose_boundary() -> str:
    return uuid.uuid4().hex


class MultipartStreamBuilder:
    """
    Collects named parts and serializes them into a multipart/form-data body.

    Parts are kept in a dict keyed by name: adding a name a second time
    replaces the earlier part but keeps its position in the body.

    Content streams are referenced, not copied, and read when build() runs.
    Seekable sources are rewound first, so build() can be called repeatedly.
    One-shot sources raise StreamConsumedError when read a second time.
    """

    def __init__(
        self,
        stream_factory: StreamFactory | None = None,
        boundary: str | None = None,
        mimetype_helper: MimetypeHelper | None = None,
    ) -> None:
        if stream_factory is None:
            stream_factory = StreamFactory()
        if not callable(getattr(stream_factory, "create_stream", None)):
            raise ConfigurationError(
                f"{type(stream_factory).__name__} does not provide create_stream()"
            )
        self.stream_factory = stream_factory
        self._boundary = boundary
        self.mimetype_helper = default_helper
        if mimetype_helper is not None:
            self.set_mimetype_helper(mimetype_helper)
        self._parts: dict[str, Part] = {}

    def add_part(
        self,
        name: str,
        resource: Any,
        headers: HeadersInput | None = None,
        filename: str | None = None,
    ) -> MultipartStreamBuilder:
        """
        Add a resource to the body. Re-using a name replaces the earlier part.

        Args:
            name: Form field name.
            resource: Anything the stream factory accepts: bytes, text, an open
                file, a path, an iterable of chunks, or a Stream.
            headers: Extra part headers. They win over inferred ones.
            filename: Filename for the disposition header. When empty, the
                stream's source location is used if it names a real file.

        Returns:
            The builder, for chaining.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Part name must be a non-empty string")

        stream = self.stream_factory.create_stream(resource)
        part_headers = HeaderList(headers)

        if filename is None or filename == "":
            filename = None
            location = stream.source_location()
            if location and not location.startswith(EPHEMERAL_PREFIX):
                filename = location

        self._prepare_headers(name, stream, filename, part_headers)
        self._parts[name] = Part(name, stream, part_headers, filename)
        logger.debug(
            "Registered part %r (filename=%r, headers=%s)",
            name,
            filename,
            ", ".join(part_headers),
        )
        return self

    def _prepare_headers(
        self, name: str, stream: Stream, filename: str | None, headers: HeaderList
    ) -> None:
        """Fill in disposition, length and type headers the caller left out."""
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{os.path.basename(filename)}"'
        headers.setdefault("Content-Disposition", disposition)

        if "Content-Length" not in headers:
            # Unknown or empty sizes get no header.
            size = stream.size()
            if size is not None and size > 0:
                headers.add("Content-Length", str(size))

        if "Content-Type" not in headers and filename is not None:
            mimetype = self.mimetype_helper.lookup(filename)
            if mimetype:
                headers.add("Content-Type", mimetype)

    def build(self) -> Stream:
        """
        Serialize every part, in order, and wrap the body in a stream.

        Raises:
            StreamConsumedError: If a one-shot content stream was already read.
        """
        boundary = self.get_boundary()
        delimiter = f"--{boundary}\r\n".encode("utf-8")
        chunks: list[bytes] = []
        for part in self._parts.values():
            chunks.append(delimiter)
            chunks.append(part.headers.render())
            chunks.append(b"\r\n")
            chunks.append(part.contents.read_all())
            chunks.append(b"\r\n")
        chunks.append(f"--{boundary}--\r\n".encode("utf-8"))
        body = b"".join(chunks)
        logger.debug("Built multipart body: %d parts, %d bytes", len(self._parts), len(body))
        return self.stream_factory.create_stream(body)

    def get_boundary(self) -> str:
        if self._boundary is None:
            self._boundary = _choose_boundary()
            logger.debug("Generated boundary %s", self._boundary)
        return self._boundary

    def set_boundary(self, boundary: str) -> MultipartStreamBuilder:
        self._boundary = boundary
        return self

    def set_mimetype_helper(self, helper: MimetypeHelper) -> MultipartStreamBuilder:
        if not callable(getattr(helper, "lookup", None)):
            raise ConfigurationError(f"{type(helper).__name__} does not provide lookup()")
        self.mimetype_helper = helper
        return self

    def reset(self) -> MultipartStreamBuilder:
        """Forget all parts and the boundary."""
        self._parts = {}
        self._boundary = None
        return self

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.get_boundary()}"

    @property
    def parts(self) -> tuple[Part, ...]:
        return tuple(self._parts.values())

    def __contains__(self, name: object) -> bool:
        return name in self._parts

    def __len__(self) -> int:
        return len(self._parts)


def build_multipart(
    data: Mapping[str, str] | None,
    files: Mapping[str, Any | tuple[str, Any, str | None]],
    boundary: str | None = None,
) -> tuple[str, bytes]:
    """
    Build a multipart/form-data body in one call.
    `files` values can be raw content or (filename, content, content_type|None).
    Raw content is sent with the field name as its filename.

    Returns the Content-Type header value and the body.
    """
    builder = MultipartStreamBuilder(boundary=boundary)
    if data:
        for k, v in data.items():
            builder.add_part(k, v)
    for field, val in files.items():
        if isinstance(val, tuple):
            filename, content, ctype = val
            headers = {"Content-Type": ctype} if ctype else None
            builder.add_part(field, content, headers=headers, filename=filename)
        else:
            builder.add_part(field, val, filename=field)
    return builder.content_type, builder.build().read_all()
