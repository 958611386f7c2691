#!/usr/bin/env python3
"""
Basic example demonstrating tcp-test channels.

This example shows:
1. Establishing a channel
2. Checking the endpoint addresses
3. Sending data both ways
4. End-of-stream after one side closes
"""

import sys
import os

# Add the tcp_test package to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from tcp_test import ChannelConfig, channel, read_exact, read_to_end


def main():
    print("tcp-test - loopback channel demo")
    print("=" * 40)

    # 1. Establish a channel
    print("\n1. Establishing channel...")
    local, remote = channel(ChannelConfig(strategy="threaded"))

    with local, remote:
        # 2. Addresses
        print(f"   local:  {local.getsockname()} -> {local.getpeername()}")
        print(f"   remote: {remote.getsockname()} -> {remote.getpeername()}")

        # 3. Data in both directions
        print("\n2. Sending data...")
        local.sendall(b"Hello, dear listener!")
        print(f"   remote read: {read_exact(remote, 21)!r}")

        remote.sendall(b"Hello back")
        print(f"   local read:  {read_exact(local, 10)!r}")

        # 4. End-of-stream
        print("\n3. Closing local...")
        local.sendall(b"last words")
        local.close()
        print(f"   remote read to end: {read_to_end(remote)!r}")

    print("\nDone.")


if __name__ == "__main__":
    main()
