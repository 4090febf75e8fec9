"""Pytest configuration and fixtures."""

import pytest
from formstream.multipart import MultipartStreamBuilder


@pytest.fixture
def builder():
    """Create a builder with a fixed boundary."""
    return MultipartStreamBuilder(boundary="B1")


@pytest.fixture
def photo_file(tmp_path):
    """Create a small JPEG-named file on disk."""
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fakejpeg")
    return path


@pytest.fixture
def factory_spy(mocker):
    """Create a stream factory double that delegates to the real factory."""
    from formstream.streams import StreamFactory

    real = StreamFactory()
    spy = mocker.Mock(spec=StreamFactory)
    spy.create_stream.side_effect = real.create_stream
    return spy
