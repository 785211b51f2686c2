"""Tests for upload source streams."""

import io

from teldrive.streams import FileStream


def test_from_path_reads_name_and_size(sample_file):
    with FileStream.from_path(sample_file) as stream:
        assert stream.name == 'test.txt'
        assert stream.size == 26
        assert stream.read(6) == b'Sample'


def test_from_path_custom_name_and_close(sample_file):
    stream = FileStream.from_path(sample_file, name='remote.txt')
    stream.close()

    assert stream.name == 'remote.txt'
    assert stream._reader.closed


def test_wrapped_reader_is_not_closed():
    """Test that a caller-owned reader stays open."""
    buffer = io.BytesIO(b'abc')

    with FileStream('abc.bin', 3, buffer) as stream:
        assert stream.read(10) == b'abc'

    assert not buffer.closed
