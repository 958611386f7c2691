"""
Configuration management for tcp-test.

Every setting has a default, so establishing a channel needs no configuration
at all. The defaults can be overridden per call with a ChannelConfig or
process-wide through environment variables:

- TCP_TEST_HOST: loopback address to listen on (127.0.0.1, ::1, localhost)
- TCP_TEST_TIMEOUT: seconds allowed for the connect/accept handshake
- TCP_TEST_STRATEGY: "sequential" or "threaded"
"""

import os
import socket
import ipaddress
from typing import Mapping, Optional


DEFAULT_HOST = "127.0.0.1"
DEFAULT_TIMEOUT = 10.0
DEFAULT_STRATEGY = "sequential"

STRATEGIES = ("sequential", "threaded")

ENV_HOST = "TCP_TEST_HOST"
ENV_TIMEOUT = "TCP_TEST_TIMEOUT"
ENV_STRATEGY = "TCP_TEST_STRATEGY"


class ConfigError(Exception):
    """Raised when configuration values are invalid."""
    pass


def validate_host(host: str) -> str:
    """
    Check that a host is a loopback address.

    Args:
        host: Address literal, or "localhost"

    Returns:
        The address literal to bind to

    Raises:
        ConfigError: If the host is not on the loopback interface
    """
    if host == "localhost":
        return DEFAULT_HOST

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        raise ConfigError(f"Host must be a loopback address literal: {host!r}")

    if not address.is_loopback:
        raise ConfigError(f"Only loopback addresses are supported: {host}")

    return str(address)


def validate_timeout(timeout) -> float:
    """Check that a handshake timeout is a positive number of seconds."""
    try:
        value = float(timeout)
    except (TypeError, ValueError):
        raise ConfigError(f"Timeout must be a number of seconds: {timeout!r}")

    if value <= 0:
        raise ConfigError(f"Timeout must be positive: {value}")

    return value


def validate_strategy(strategy: str) -> str:
    """Check that a strategy name is one of STRATEGIES."""
    if strategy not in STRATEGIES:
        raise ConfigError(
            f"Unknown strategy {strategy!r}, expected one of {', '.join(STRATEGIES)}"
        )
    return strategy


class ChannelConfig:
    """
    Settings for establishing a channel.

    Values are validated on construction, so a ChannelConfig instance is
    always usable.
    """

    def __init__(self, host: str = DEFAULT_HOST, timeout: float = DEFAULT_TIMEOUT,
                 strategy: str = DEFAULT_STRATEGY):
        """
        Initialize configuration.

        Args:
            host: Loopback address for the ephemeral listener
            timeout: Seconds allowed for the connect/accept handshake
            strategy: "sequential" (non-blocking connect, then accept) or
                "threaded" (connect on a helper thread joined before return)

        Raises:
            ConfigError: If any value is invalid
        """
        self.host = validate_host(host)
        self.timeout = validate_timeout(timeout)
        self.strategy = validate_strategy(strategy)

    @property
    def family(self) -> int:
        """Address family matching the configured host."""
        if ipaddress.ip_address(self.host).version == 6:
            return socket.AF_INET6
        return socket.AF_INET

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ChannelConfig':
        """
        Build a configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            ChannelConfig with overrides applied to the defaults
        """
        if environ is None:
            environ = os.environ

        return cls(
            host=environ.get(ENV_HOST) or DEFAULT_HOST,
            timeout=environ.get(ENV_TIMEOUT) or DEFAULT_TIMEOUT,
            strategy=environ.get(ENV_STRATEGY) or DEFAULT_STRATEGY,
        )

    def to_dict(self) -> dict:
        """Export the configuration, mostly for logs and reports."""
        return {
            'host': self.host,
            'timeout': self.timeout,
            'strategy': self.strategy,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChannelConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"ChannelConfig(host={self.host!r}, timeout={self.timeout!r}, "
                f"strategy={self.strategy!r})")
