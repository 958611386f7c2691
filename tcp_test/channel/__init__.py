"""
Channel layer components for tcp-test.

This module provides:
- Establishment of connected loopback socket pairs
- Helpers for reading fixed amounts of data from them
"""

from .establish import (
    establish_channel,
    channel,
    EstablishmentError,
    ListenFailed,
    ConnectFailed,
    AcceptFailed,
)
from .io import read_exact, read_to_end, read_assert

__all__ = [
    'establish_channel',
    'channel',
    'EstablishmentError',
    'ListenFailed',
    'ConnectFailed',
    'AcceptFailed',
    'read_exact',
    'read_to_end',
    'read_assert',
]
