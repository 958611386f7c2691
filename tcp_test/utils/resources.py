"""
Process resource accounting for tcp-test.

Used to check that establishing and closing channels does not leak socket
descriptors.
"""

from typing import Optional

import psutil

from ..channel.platform import IS_WINDOWS


def open_descriptor_count(process: Optional[psutil.Process] = None) -> int:
    """
    Count the open file descriptors (handles on Windows) of a process.

    Args:
        process: Process to inspect, defaults to the current one

    Returns:
        Number of open descriptors or handles
    """
    if process is None:
        process = psutil.Process()

    if IS_WINDOWS:
        return process.num_handles()
    return process.num_fds()


class DescriptorTracker:
    """
    Context manager recording descriptor counts around a block.

    Example:
        >>> with DescriptorTracker() as tracker:
        ...     local, remote = establish_channel()
        ...     local.close(); remote.close()
        >>> tracker.leaked
        0
    """

    def __init__(self):
        self.process = psutil.Process()
        self.before = None
        self.after = None

    def __enter__(self):
        self.before = open_descriptor_count(self.process)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.after = open_descriptor_count(self.process)

    @property
    def leaked(self) -> int:
        """Descriptors opened inside the block and still open after it."""
        if self.before is None or self.after is None:
            return 0
        return max(0, self.after - self.before)
