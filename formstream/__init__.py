from formstream.multipart import MultipartStreamBuilder, Part, build_multipart
from formstream.headers import HeaderList
from formstream.mimetype import MimetypeHelper, get_mimetype_from_filename
from formstream.streams import (
    EPHEMERAL_PREFIX,
    Stream,
    BytesStream,
    FileStream,
    PathStream,
    IteratorStream,
    StreamFactory,
)
from formstream.errors import (
    FormStreamError,
    ConfigurationError,
    StreamError,
    StreamConsumedError,
)

__all__ = [
    "MultipartStreamBuilder",
    "Part",
    "build_multipart",
    "HeaderList",
    "MimetypeHelper",
    "get_mimetype_from_filename",
    "EPHEMERAL_PREFIX",
    "Stream",
    "BytesStream",
    "FileStream",
    "PathStream",
    "IteratorStream",
    "StreamFactory",
    "FormStreamError",
    "ConfigurationError",
    "StreamError",
    "StreamConsumedError",
]
