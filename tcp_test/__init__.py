"""
tcp-test: programmatically test TCP programs using real TCP streams.

A single call returns two real sockets connected to each other over the
loopback interface. The port is chosen by the OS, so tests never collide on
a hard-coded port and never manage a listener themselves.

Basic Usage:
    >>> from tcp_test import channel, read_to_end
    >>>
    >>> local, remote = channel()
    >>> with local, remote:
    ...     local.sendall(b"Hello, dear listener!")
    ...     local.close()
    ...     print(read_to_end(remote))
    b'Hello, dear listener!'

Installed as a pytest plugin, it also provides the ``tcp_channel`` and
``tcp_channel_factory`` fixtures.
"""

__version__ = "0.1.0"

from .config import ChannelConfig, ConfigError
from .channel.establish import (
    establish_channel,
    channel,
    EstablishmentError,
    ListenFailed,
    ConnectFailed,
    AcceptFailed,
)
from .channel.io import read_exact, read_to_end, read_assert

__all__ = [
    '__version__',

    # Establishment
    'establish_channel',
    'channel',
    'EstablishmentError',
    'ListenFailed',
    'ConnectFailed',
    'AcceptFailed',

    # Configuration
    'ChannelConfig',
    'ConfigError',

    # Stream helpers
    'read_exact',
    'read_to_end',
    'read_assert',
]
