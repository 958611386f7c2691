"""
Stress evaluation for channel establishment.

Establishes many channels in a row and checks that every one of them works
and that no socket descriptors are left behind.
"""

import gc
import time
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from ..config import ChannelConfig
from ..channel.establish import establish_channel, EstablishmentError
from ..channel.io import read_exact
from ..utils.resources import open_descriptor_count


logger = logging.getLogger(__name__)

PAYLOAD = b"Hello, dear listener!"


@dataclass
class StressResult:
    """Container for stress run results."""
    iterations: int
    succeeded: int = 0
    failures: List[str] = field(default_factory=list)
    distinct_ports: int = 0
    descriptors_before: Optional[int] = None
    descriptors_after: Optional[int] = None
    elapsed: float = 0.0
    strategy: str = ""

    @property
    def leaked_descriptors(self) -> int:
        if self.descriptors_before is None or self.descriptors_after is None:
            return 0
        return max(0, self.descriptors_after - self.descriptors_before)

    @property
    def passed(self) -> bool:
        return self.succeeded == self.iterations and self.leaked_descriptors == 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data['leaked_descriptors'] = self.leaked_descriptors
        data['passed'] = self.passed
        return data


class ExchangeError(Exception):
    """Raised when data read from a channel differs from what was sent."""
    pass


def exchange_payload(local, remote, payload: bytes = PAYLOAD) -> None:
    """
    Send payload in both directions over a channel and verify it.

    Raises:
        ExchangeError: If the bytes received differ from those sent
    """
    local.sendall(payload)
    received = read_exact(remote, len(payload))
    if received != payload:
        raise ExchangeError(f"local -> remote corrupted: {received!r}")

    remote.sendall(payload[::-1])
    received = read_exact(local, len(payload))
    if received != payload[::-1]:
        raise ExchangeError(f"remote -> local corrupted: {received!r}")


def run_stress(iterations: int = 1000, config: Optional[ChannelConfig] = None,
               exchange: bool = True) -> StressResult:
    """
    Establish, use and close channels repeatedly.

    Args:
        iterations: Number of channels to establish
        config: Channel settings, defaults to ChannelConfig.from_env()
        exchange: Whether to send a payload both ways on each channel

    Returns:
        StressResult; failures are recorded rather than raised
    """
    if config is None:
        config = ChannelConfig.from_env()

    result = StressResult(iterations=iterations, strategy=config.strategy)
    ports = set()

    gc.collect()
    result.descriptors_before = open_descriptor_count()
    start = time.perf_counter()

    for i in range(iterations):
        try:
            local, remote = establish_channel(config)
        except EstablishmentError as e:
            result.failures.append(f"iteration {i}: {e}")
            continue

        with local, remote:
            ports.add(remote.getsockname()[1])
            try:
                if exchange:
                    exchange_payload(local, remote)
            except (ExchangeError, EOFError, OSError) as e:
                result.failures.append(f"iteration {i}: {e}")
                continue

        result.succeeded += 1

    result.elapsed = time.perf_counter() - start
    gc.collect()
    result.descriptors_after = open_descriptor_count()
    result.distinct_ports = len(ports)

    logger.info(
        f"Stress run finished: {result.succeeded}/{iterations} channels, "
        f"{result.leaked_descriptors} leaked descriptors, {result.elapsed:.2f}s"
    )
    return result
