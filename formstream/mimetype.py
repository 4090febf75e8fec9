"""
Filename extension to MIME type lookup.

The table covers common text, image, audio, video and application types. It
is not meant to be exhaustive: build a MimetypeHelper with extra entries, or
call register() on one, to teach it more extensions.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

MIMETYPES: dict[str, str] = {
    # Text
    "txt": "text/plain",
    "text": "text/plain",
    "log": "text/plain",
    "conf": "text/plain",
    "ini": "text/plain",
    "csv": "text/csv",
    "tsv": "text/tab-separated-values",
    "htm": "text/html",
    "html": "text/html",
    "css": "text/css",
    "ics": "text/calendar",
    "md": "text/markdown",
    "markdown": "text/markdown",
    "rtx": "text/richtext",
    "vcf": "text/x-vcard",
    "yaml": "text/yaml",
    "yml": "text/yaml",
    "xsl": "application/xml",
    "xml": "application/xml",
    # Images
    "bmp": "image/bmp",
    "gif": "image/gif",
    "ico": "image/x-icon",
    "jpe": "image/jpeg",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "svg": "image/svg+xml",
    "svgz": "image/svg+xml",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "webp": "image/webp",
    "heic": "image/heic",
    "avif": "image/avif",
    "psd": "image/vnd.adobe.photoshop",
    # Audio
    "aac": "audio/aac",
    "aif": "audio/x-aiff",
    "aiff": "audio/x-aiff",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "mid": "audio/midi",
    "midi": "audio/midi",
    "mp3": "audio/mpeg",
    "mpga": "audio/mpeg",
    "oga": "audio/ogg",
    "ogg": "audio/ogg",
    "opus": "audio/opus",
    "wav": "audio/x-wav",
    "weba": "audio/webm",
    "wma": "audio/x-ms-wma",
    # Video
    "3gp": "video/3gpp",
    "avi": "video/x-msvideo",
    "flv": "video/x-flv",
    "m4v": "video/x-m4v",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
    "mp4": "video/mp4",
    "mpeg": "video/mpeg",
    "mpg": "video/mpeg",
    "ogv": "video/ogg",
    "qt": "video/quicktime",
    "webm": "video/webm",
    "wmv": "video/x-ms-wmv",
    # Fonts
    "otf": "font/otf",
    "ttf": "font/ttf",
    "woff": "font/woff",
    "woff2": "font/woff2",
    # Applications and archives
    "7z": "application/x-7z-compressed",
    "bin": "application/octet-stream",
    "bz2": "application/x-bzip2",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "dot": "application/msword",
    "epub": "application/epub+zip",
    "exe": "application/octet-stream",
    "gz": "application/x-gzip",
    "jar": "application/java-archive",
    "js": "application/javascript",
    "json": "application/json",
    "jsonld": "application/ld+json",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odt": "application/vnd.oasis.opendocument.text",
    "pdf": "application/pdf",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "ps": "application/postscript",
    "rar": "application/x-rar-compressed",
    "rtf": "application/rtf",
    "sh": "application/x-sh",
    "swf": "application/x-shockwave-flash",
    "tar": "application/x-tar",
    "tgz": "application/x-gzip",
    "wasm": "application/wasm",
    "xhtml": "application/xhtml+xml",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "zip": "application/zip",
}


def _extension(filename: str) -> str:
    base = os.path.basename(os.fspath(filename))
    _, dot, ext = base.rpartition(".")
    if not dot:
        return ""
    return ext.lower()


class MimetypeHelper:
    """Looks up MIME types by filename extension."""

    def __init__(self, extra: Mapping[str, str] | None = None) -> None:
        self._table = dict(MIMETYPES)
        if extra:
            for ext, mimetype in extra.items():
                self.register(ext, mimetype)

    def register(self, extension: str, mimetype: str) -> None:
        self._table[extension.lower().lstrip(".")] = mimetype

    def lookup(self, filename: str) -> str | None:
        """Return the MIME type for `filename`, or None when no entry matches."""
        ext = _extension(filename)
        if not ext:
            return None
        return self._table.get(ext)


default_helper = MimetypeHelper()


def get_mimetype_from_filename(filename: str) -> str | None:
    """Look `filename` up in the default table."""
    return default_helper.lookup(filename)
