"""
Channel establishment for tcp-test.

A channel is a pair of connected TCP sockets on the loopback interface.
The listening socket that pairs them lives only for the duration of one
call: it is bound to port 0 so the OS picks a free port, accepts the
connection made by its own client and is closed before the pair is handed back.
"""

import logging
import socket
import threading
import time
from typing import Optional, Tuple

from ..config import ChannelConfig
from . import platform


logger = logging.getLogger(__name__)


def format_address(address: Tuple) -> str:
    """Render a socket address as host:port, bracketing IPv6 hosts."""
    host, port = address[0], address[1]
    if ':' in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class EstablishmentError(Exception):
    """
    Raised when a channel cannot be established.

    Attributes:
        phase: "listen", "connect" or "accept"
        os_error: The underlying OSError (also chained as __cause__)
        address: Address of the listener, with port 0 if binding failed
    """

    phase = "establish"

    def __init__(self, os_error: BaseException, address: Optional[Tuple] = None):
        self.os_error = os_error
        self.address = address
        location = f" ({format_address(address)})" if address else ""
        super().__init__(f"{self.phase} failed{location}: {os_error}")


class ListenFailed(EstablishmentError):
    """The ephemeral listening socket could not be created."""
    phase = "listen"


class ConnectFailed(EstablishmentError):
    """The outbound connection to the listener failed."""
    phase = "connect"


class AcceptFailed(EstablishmentError):
    """The listener did not accept the pending connection."""
    phase = "accept"


def _pending_connect_error(sock: socket.socket) -> Optional[OSError]:
    # Poll only; a handshake still in flight is not an error.
    try:
        platform.finish_connect(sock, 0)
    except socket.timeout:
        return None
    except OSError as e:
        return e
    return None


def _peer_address(sock: socket.socket) -> Optional[Tuple]:
    try:
        return sock.getpeername()[:2]
    except OSError:
        return None


def _accept_own(listener: socket.socket, local: socket.socket,
                remote: socket.socket, deadline: float) -> socket.socket:
    """
    Make sure remote is the accepted end of local.

    Another process may connect to the ephemeral port before our client
    does. Such connections are closed and accepting continues until the
    deadline.
    """
    expected = local.getsockname()[:2]
    while _peer_address(remote) != expected:
        stray = _peer_address(remote)
        logger.warning(
            f"Discarding unexpected connection from "
            f"{format_address(stray) if stray else 'a closed peer'}"
        )
        remote.close()
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise socket.timeout("own connection was not accepted in time")
        remote = platform.accept_one(listener, remaining)
    return remote


def _establish_sequential(listener: socket.socket, address: Tuple,
                          timeout: float) -> Tuple[socket.socket, socket.socket]:
    """Non-blocking connect, blocking accept, then wait for the connect."""
    deadline = time.monotonic() + timeout

    try:
        local = platform.begin_connect(listener.family, address)
    except OSError as e:
        raise ConnectFailed(e, address) from e

    remote = None
    try:
        try:
            remote = platform.accept_one(listener, timeout)
        except OSError as e:
            connect_error = _pending_connect_error(local)
            if connect_error is not None:
                raise ConnectFailed(connect_error, address) from connect_error
            raise AcceptFailed(e, address) from e

        try:
            platform.finish_connect(local, timeout)
        except OSError as e:
            raise ConnectFailed(e, address) from e

        try:
            remote = _accept_own(listener, local, remote, deadline)
        except OSError as e:
            raise AcceptFailed(e, address) from e
    except BaseException:
        local.close()
        if remote is not None:
            remote.close()
        raise

    return local, remote


def _establish_threaded(listener: socket.socket, address: Tuple,
                        timeout: float) -> Tuple[socket.socket, socket.socket]:
    """Blocking connect on a helper thread while the caller accepts."""
    deadline = time.monotonic() + timeout
    outcome = {}

    def _connect():
        try:
            outcome['socket'] = platform.connect_blocking(listener.family, address, timeout)
        except Exception as e:
            outcome['error'] = e

    connector = threading.Thread(
        target=_connect,
        name=f"tcp-test connect {format_address(address)}",
    )
    connector.start()

    remote = None
    try:
        try:
            remote = platform.accept_one(listener, timeout)
        except OSError as e:
            connector.join()
            connect_error = outcome.get('error')
            if isinstance(connect_error, OSError):
                raise ConnectFailed(connect_error, address) from connect_error
            raise AcceptFailed(e, address) from e

        connector.join()

        error = outcome.get('error')
        if error is not None:
            if not isinstance(error, OSError):
                raise error
            raise ConnectFailed(error, address) from error

        try:
            remote = _accept_own(listener, outcome['socket'], remote, deadline)
        except OSError as e:
            raise AcceptFailed(e, address) from e
    except BaseException:
        connector.join()
        if 'socket' in outcome:
            outcome['socket'].close()
        if remote is not None:
            remote.close()
        raise

    return outcome['socket'], remote


STRATEGIES = {
    'sequential': _establish_sequential,
    'threaded': _establish_threaded,
}


def establish_channel(config: Optional[ChannelConfig] = None) -> Tuple[socket.socket, socket.socket]:
    """
    Return two TCP sockets connected to each other over loopback.

    The first socket (local) is the connecting side, the second (remote) the
    accepted side, so local.getpeername() == remote.getsockname() and
    remote.getpeername() == local.getsockname(). Both are in blocking mode
    and owned by the caller, who must close them; they are context managers.

    Args:
        config: Optional settings. Defaults to ChannelConfig.from_env().

    Returns:
        (local, remote) connected sockets

    Raises:
        ListenFailed: If the listening socket cannot be created
        ConnectFailed: If connecting to the listener fails
        AcceptFailed: If the connection cannot be accepted
    """
    if config is None:
        config = ChannelConfig.from_env()

    establish = STRATEGIES[config.strategy]

    try:
        listener = platform.open_listener(config.family, config.host)
    except OSError as e:
        error = ListenFailed(e, (config.host, 0))
        logger.error(f"Channel establishment failed: {error}")
        raise error from e

    try:
        address = listener.getsockname()
        logger.debug(f"Listening on {format_address(address)} ({config.strategy})")
        local, remote = establish(listener, address, config.timeout)
    except EstablishmentError as e:
        logger.error(f"Channel establishment failed: {e}")
        raise
    finally:
        listener.close()

    logger.debug(
        f"Channel established: {format_address(local.getsockname())} -> "
        f"{format_address(remote.getsockname())}"
    )
    return local, remote


channel = establish_channel
