"""
pytest Fixture Tests for tcp-test.
"""

from tcp_test import ChannelConfig
from tcp_test.channel.io import read_exact


def test_tcp_channel_fixture(tcp_channel):
    """Test the fixture yields a connected pair."""
    local, remote = tcp_channel
    assert local.getpeername() == remote.getsockname()

    remote.sendall(b"from remote")
    assert read_exact(local, 11) == b"from remote"


def test_tcp_channel_factory(tcp_channel_factory):
    """Test the factory yields independent pairs on distinct ports."""
    pairs = [tcp_channel_factory() for _ in range(3)]
    pairs.append(tcp_channel_factory(ChannelConfig(strategy="threaded")))

    ports = {remote.getsockname()[1] for _, remote in pairs}
    assert len(ports) == 4

    for index, (local, remote) in enumerate(pairs):
        local.sendall(bytes([index]))
    for index, (local, remote) in enumerate(pairs):
        assert read_exact(remote, 1) == bytes([index])
