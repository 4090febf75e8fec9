"""Tests for formstream.streams module."""

import gc
import io
import os
import pytest
import warnings
from formstream.errors import StreamConsumedError, StreamError
from formstream.streams import (
    EPHEMERAL_PREFIX,
    BytesStream,
    FileStream,
    PathStream,
    IteratorStream,
    Stream,
    StreamFactory,
)


class TestBytesStream:
    """Tests for BytesStream."""

    def test_size_and_content(self):
        """Test size and content of an in-memory stream."""
        stream = BytesStream(b"hello")
        assert stream.size() == 5
        assert stream.read_all() == b"hello"

    def test_text_is_utf8_encoded(self):
        """Test text input is UTF-8 encoded."""
        stream = BytesStream("héllo")
        assert stream.read_all() == "héllo".encode("utf-8")
        assert stream.size() == 6

    def test_location_is_ephemeral(self):
        """Test in-memory streams report the ephemeral marker."""
        assert BytesStream(b"x").source_location().startswith(EPHEMERAL_PREFIX)

    def test_rereadable(self):
        """Test content can be read repeatedly."""
        stream = BytesStream(b"abc")
        assert stream.read_all() == stream.read_all() == b"abc"


class TestFileStream:
    """Tests for FileStream."""

    def test_disk_file(self, tmp_path):
        """Test a file on disk reports its path and size."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")
        with open(path, "rb") as fh:
            stream = FileStream(fh)
            assert stream.source_location() == str(path)
            assert stream.size() == 10
            assert stream.read_all() == b"0123456789"

    def test_size_ignores_position(self, tmp_path):
        """Test size reports the full size and keeps the read position."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")
        with open(path, "rb") as fh:
            fh.read(4)
            stream = FileStream(fh)
            assert stream.size() == 10
            assert fh.tell() == 4

    def test_read_all_rewinds(self, tmp_path):
        """Test seekable files are read from the start every time."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"abcdef")
        with open(path, "rb") as fh:
            fh.read(3)
            stream = FileStream(fh)
            assert stream.read_all() == b"abcdef"
            assert stream.read_all() == b"abcdef"

    def test_text_file(self, tmp_path):
        """Test text handles are read and encoded to bytes with unknown size."""
        path = tmp_path / "notes.txt"
        path.write_text("line one\n", encoding="utf-8")
        with open(path, "r", encoding="utf-8", newline="") as fh:
            stream = FileStream(fh)
            assert stream.size() is None
            assert stream.read_all() == b"line one\n"

    def test_text_file_with_crlf(self, tmp_path):
        """Test newline translation does not yield a wrong size."""
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"a\r\nb")
        with open(path, "r", encoding="utf-8") as fh:
            stream = FileStream(fh)
            assert stream.size() is None
            assert stream.read_all() == b"a\nb"

    def test_text_file_latin1(self, tmp_path):
        """Test re-encoding to UTF-8 does not yield a wrong size."""
        path = tmp_path / "latin.txt"
        path.write_bytes("ééé".encode("latin-1"))
        with open(path, "r", encoding="latin-1") as fh:
            stream = FileStream(fh)
            assert stream.size() is None
            assert stream.read_all() == "ééé".encode("utf-8")

    def test_bytesio(self):
        """Test BytesIO is treated as in-memory."""
        stream = FileStream(io.BytesIO(b"abc"))
        assert stream.size() == 3
        assert stream.source_location() == EPHEMERAL_PREFIX
        assert stream.read_all() == b"abc"

    def test_stringio(self):
        """Test StringIO size counts encoded bytes."""
        stream = FileStream(io.StringIO("é"))
        assert stream.size() == 2
        assert stream.read_all() == "é".encode("utf-8")

    def test_pipe_is_one_shot(self):
        """Test a pipe has no size or location and can be read only once."""
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"piped")
        os.close(write_fd)
        with os.fdopen(read_fd, "rb") as fh:
            stream = FileStream(fh)
            assert stream.seekable() is False
            assert stream.size() is None
            assert stream.source_location() is None
            assert stream.read_all() == b"piped"
            with pytest.raises(StreamConsumedError):
                stream.read_all()

    def test_pseudo_name_has_no_location(self, mocker):
        """Test names like <stdin> are not used as locations."""
        fh = mocker.Mock()
        fh.name = "<stdin>"
        fh.closed = False
        assert FileStream(fh).source_location() is None

    def test_closed_file_raises(self, tmp_path):
        """Test a closed handle is rejected."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"x")
        fh = open(path, "rb")
        fh.close()
        with pytest.raises(StreamError, match="closed"):
            FileStream(fh)

    def test_unreadable_object_raises(self):
        """Test objects without read() are rejected."""
        with pytest.raises(StreamError, match="not readable"):
            FileStream(object())


class TestPathStream:
    """Tests for PathStream."""

    def test_size_location_and_content(self, tmp_path):
        """Test a path reports its size, location and content."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")
        stream = PathStream(path)
        assert stream.size() == 10
        assert stream.source_location() == str(path)
        assert stream.seekable() is True
        assert stream.read_all() == stream.read_all() == b"0123456789"

    def test_reads_current_content(self, tmp_path):
        """Test content is read when asked for, not when constructed."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"old")
        stream = PathStream(path)
        path.write_bytes(b"newer")
        assert stream.size() == 5
        assert stream.read_all() == b"newer"

    def test_no_handle_left_open(self, tmp_path):
        """Test reading a path leaves no file handle behind."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"abc")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            stream = StreamFactory().create_stream(path)
            stream.size()
            stream.read_all()
            del stream
            gc.collect()
        assert not [w for w in caught if issubclass(w.category, ResourceWarning)]

    def test_file_removed_after_construction(self, tmp_path):
        """Test a vanished file gives unknown size and a read error."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"abc")
        stream = PathStream(path)
        path.unlink()
        assert stream.size() is None
        with pytest.raises(StreamError, match="Cannot read"):
            stream.read_all()

    def test_directory_raises(self, tmp_path):
        """Test a directory path is rejected."""
        with pytest.raises(StreamError, match="Cannot open"):
            PathStream(tmp_path)


class TestIteratorStream:
    """Tests for IteratorStream."""

    def test_joins_chunks(self):
        """Test chunks are concatenated."""
        stream = IteratorStream([b"ab", "cd", b"e"])
        assert stream.size() is None
        assert stream.source_location() is None
        assert stream.read_all() == b"abcde"

    def test_single_use(self):
        """Test a second read raises StreamConsumedError."""
        stream = IteratorStream(iter([b"x"]))
        stream.read_all()
        with pytest.raises(StreamConsumedError):
            stream.read_all()

    def test_bad_chunk(self):
        """Test non-bytes chunks raise StreamError."""
        with pytest.raises(StreamError):
            IteratorStream([b"ok", object()]).read_all()


class TestStreamFactory:
    """Tests for StreamFactory.create_stream."""

    def test_stream_returned_as_is(self):
        """Test an existing Stream is passed through."""
        stream = BytesStream(b"x")
        assert StreamFactory().create_stream(stream) is stream

    @pytest.mark.parametrize(
        "resource,expected",
        [
            (b"bytes", b"bytes"),
            (bytearray(b"array"), b"array"),
            (memoryview(b"view"), b"view"),
            ("text", b"text"),
            (42, b"42"),
            (1.5, b"1.5"),
            (None, b""),
        ],
    )
    def test_scalar_resources(self, resource, expected):
        """Test in-memory resources become BytesStream."""
        stream = StreamFactory().create_stream(resource)
        assert isinstance(stream, BytesStream)
        assert stream.read_all() == expected

    def test_path_resource(self, tmp_path):
        """Test a PathLike becomes a PathStream."""
        path = tmp_path / "a.txt"
        path.write_bytes(b"from disk")
        stream = StreamFactory().create_stream(path)
        assert isinstance(stream, PathStream)
        assert stream.source_location() == str(path)
        assert stream.read_all() == b"from disk"

    def test_missing_path_raises(self, tmp_path):
        """Test a missing path raises StreamError."""
        with pytest.raises(StreamError, match="Cannot open"):
            StreamFactory().create_stream(tmp_path / "missing.txt")

    def test_file_object(self):
        """Test file objects become FileStream."""
        stream = StreamFactory().create_stream(io.BytesIO(b"x"))
        assert isinstance(stream, FileStream)

    def test_iterable(self):
        """Test generators become IteratorStream."""
        stream = StreamFactory().create_stream(c for c in [b"a", b"b"])
        assert isinstance(stream, IteratorStream)
        assert stream.read_all() == b"ab"

    @pytest.mark.parametrize("resource", [object(), {"a": 1}, True])
    def test_unsupported_resource_raises(self, resource):
        """Test unsupported resources raise StreamError."""
        with pytest.raises(StreamError, match="Cannot create a stream"):
            StreamFactory().create_stream(resource)

    def test_base_stream_is_abstract(self):
        """Test the base class has no size or content."""
        with pytest.raises(NotImplementedError):
            Stream().size()
        with pytest.raises(NotImplementedError):
            Stream().read_all()
