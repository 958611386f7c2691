"""
Stream helpers for reading from channel endpoints.

A stream socket may return fewer bytes than requested from a single recv(),
so tests that expect a fixed amount of data should read through these
helpers instead of calling recv() once.
"""

from typing import Union


CHUNK_SIZE = 65536


def read_exact(sock, n: int) -> bytes:
    """
    Read exactly n bytes, looping over partial reads.

    Args:
        sock: Any object with a socket-like recv() method
        n: Number of bytes to read

    Returns:
        The n bytes read

    Raises:
        EOFError: If the peer closes the stream before n bytes arrive
    """
    if n < 0:
        raise ValueError(f"Cannot read a negative number of bytes: {n}")

    buf = bytearray()
    while len(buf) < n:
        chunk = sock.recv(min(n - len(buf), CHUNK_SIZE))
        if not chunk:
            raise EOFError(f"Stream closed after {len(buf)} of {n} bytes")
        buf += chunk
    return bytes(buf)


def read_to_end(sock) -> bytes:
    """Read until the peer closes its write side."""
    buf = bytearray()
    while True:
        chunk = sock.recv(CHUNK_SIZE)
        if not chunk:
            return bytes(buf)
        buf += chunk


def read_assert(sock, n: int, expected: Union[bytes, bytearray]) -> None:
    """
    Read n bytes from sock and assert they equal expected.

    Raises:
        AssertionError: If the bytes read differ from expected
        EOFError: If fewer than n bytes could be read
    """
    data = read_exact(sock, n)
    assert data == bytes(expected), (
        f"read_assert buffers are not equal: read {data!r}, expected {bytes(expected)!r}"
    )
