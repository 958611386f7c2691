"""
pytest fixtures for tcp-test.

Registered automatically through the ``pytest11`` entry point once the
package is installed.
"""

import pytest

from .channel.establish import establish_channel


@pytest.fixture
def tcp_channel():
    """A connected (local, remote) socket pair, closed after the test."""
    local, remote = establish_channel()
    with local, remote:
        yield local, remote


@pytest.fixture
def tcp_channel_factory():
    """A callable returning new (local, remote) pairs, all closed after the test."""
    opened = []

    def _factory(config=None):
        pair = establish_channel(config)
        opened.extend(pair)
        return pair

    yield _factory

    for sock in opened:
        sock.close()
