"""
Stream Helper Tests for tcp-test.
"""

import pytest
from tcp_test.channel.io import read_exact, read_to_end, read_assert


class Placeholder:
    """Reader that fills every request with zero bytes."""

    def recv(self, n):
        return bytes(n)


class ChunkedReader:
    """Reader returning its data a few bytes at a time, then end-of-stream."""

    def __init__(self, data: bytes, chunk: int = 3):
        self.data = data
        self.chunk = chunk
        self.calls = 0

    def recv(self, n):
        self.calls += 1
        size = min(n, self.chunk)
        piece, self.data = self.data[:size], self.data[size:]
        return piece


class TestReadAssert:
    """Test the read_assert helper."""

    def test_read_assert_ok(self):
        read_assert(Placeholder(), 9, bytes(9))

    def test_read_assert_fails(self):
        with pytest.raises(AssertionError) as exc_info:
            read_assert(Placeholder(), 1, b"\xff")
        assert "not equal" in str(exc_info.value)

    def test_read_assert_on_channel(self, tcp_channel):
        """Test read_assert against a real channel."""
        local, remote = tcp_channel
        local.sendall(b"Interesting story")
        read_assert(remote, 17, b"Interesting story")


class TestReadExact:
    """Test exact reads over partial recv() results."""

    def test_partial_reads_are_joined(self):
        reader = ChunkedReader(b"Hello, reader")
        assert read_exact(reader, 13) == b"Hello, reader"
        assert reader.calls == 5

    def test_leaves_remaining_data(self):
        reader = ChunkedReader(b"abcdef")
        assert read_exact(reader, 4) == b"abcd"
        assert reader.data == b"ef"

    def test_zero_bytes(self):
        reader = ChunkedReader(b"abc")
        assert read_exact(reader, 0) == b""
        assert reader.calls == 0

    def test_eof_before_complete(self):
        with pytest.raises(EOFError) as exc_info:
            read_exact(ChunkedReader(b"abc"), 10)
        assert "3 of 10" in str(exc_info.value)

    def test_negative_size(self):
        with pytest.raises(ValueError):
            read_exact(ChunkedReader(b"abc"), -1)


class TestReadToEnd:
    """Test reading until end-of-stream."""

    def test_reads_everything(self):
        assert read_to_end(ChunkedReader(b"x" * 100, chunk=7)) == b"x" * 100

    def test_empty_stream(self):
        assert read_to_end(ChunkedReader(b"")) == b""
