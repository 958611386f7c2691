"""
Socket primitives used to establish a channel.

These wrappers keep platform differences in blocking connect/accept
behaviour out of the establishment algorithm. Every function raises
OSError (including socket.timeout) and nothing else, and closes any socket
it created before raising.
"""

import os
import selectors
import socket
import sys
from typing import Tuple


IS_WINDOWS = sys.platform == 'win32'

LISTEN_BACKLOG = 1


def open_listener(family: int, host: str) -> socket.socket:
    """
    Create a listening socket on an OS-assigned port.

    SO_REUSEADDR is left unset: with it, Linux may hand out a port that an
    accepted socket from an earlier channel still holds.

    Args:
        family: socket.AF_INET or socket.AF_INET6
        host: Loopback address literal

    Returns:
        Socket bound to (host, 0) and listening
    """
    listener = socket.socket(family, socket.SOCK_STREAM)
    try:
        listener.bind((host, 0))
        listener.listen(LISTEN_BACKLOG)
    except BaseException:
        listener.close()
        raise
    return listener


def begin_connect(family: int, address: Tuple) -> socket.socket:
    """
    Start a non-blocking connect to address.

    Returns:
        Socket whose handshake may still be in progress
    """
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setblocking(False)
    try:
        sock.connect(address)
    except (BlockingIOError, InterruptedError):
        pass
    except BaseException:
        sock.close()
        raise
    return sock


def finish_connect(sock: socket.socket, timeout: float) -> None:
    """
    Wait for a non-blocking connect to complete, then make sock blocking.

    selectors.DefaultSelector uses poll/epoll on POSIX, so descriptors
    above FD_SETSIZE are fine. On Windows it falls back to select() and
    also watches the exceptional set, which is where a failed connect is
    reported there.

    Raises:
        socket.timeout: If the handshake did not finish within timeout
        OSError: With the pending socket error if the connect failed
    """
    with selectors.DefaultSelector() as selector:
        selector.register(sock, selectors.EVENT_WRITE)
        ready = selector.select(timeout)

    if not ready:
        raise socket.timeout("connect did not complete in time")

    error = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
    if error:
        raise OSError(error, os.strerror(error))

    sock.setblocking(True)


def connect_blocking(family: int, address: Tuple, timeout: float) -> socket.socket:
    """
    Connect a fresh socket to address, blocking for at most timeout seconds.

    Returns:
        Connected socket in blocking mode
    """
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
        sock.connect(address)
        sock.settimeout(None)
    except BaseException:
        sock.close()
        raise
    return sock


def accept_one(listener: socket.socket, timeout: float) -> socket.socket:
    """
    Accept a single pending connection.

    Returns:
        Accepted socket in blocking mode
    """
    listener.settimeout(timeout)
    conn, _ = listener.accept()
    conn.settimeout(None)
    return conn
