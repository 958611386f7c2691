#!/usr/bin/env python3
"""
Command line runner for the tcp-test stress evaluation.

Usage:
    tcp-test-stress [--iterations N] [--strategy sequential|threaded]
                    [--timeout SECONDS] [--json] [--verbose]
    python -m tcp_test.evaluation.runner --iterations 1000
"""

import argparse
import json
import logging
import sys

from ..config import ChannelConfig, ConfigError, STRATEGIES
from .stress import run_stress


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog='tcp-test-stress',
                                     description='Establish loopback channels repeatedly and check for leaks')
    parser.add_argument('--iterations', type=int, default=1000,
                        help='Number of channels to establish (default: 1000)')
    parser.add_argument('--strategy', choices=STRATEGIES, default=None,
                        help='Establishment strategy (default: from TCP_TEST_STRATEGY or sequential)')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Handshake timeout in seconds (default: from TCP_TEST_TIMEOUT or 10)')
    parser.add_argument('--no-exchange', action='store_true',
                        help='Only establish and close, without sending data')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    """Main entry point for the stress runner."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s %(message)s'
    )

    try:
        config = ChannelConfig.from_env()
        config = ChannelConfig(
            host=config.host,
            timeout=args.timeout if args.timeout is not None else config.timeout,
            strategy=args.strategy or config.strategy,
        )
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    result = run_stress(args.iterations, config, exchange=not args.no_exchange)

    if args.json:
        print(json.dumps({'config': config.to_dict(), 'result': result.to_dict()}, indent=2))
    else:
        print(f"Strategy:           {result.strategy}")
        print(f"Channels:           {result.succeeded}/{result.iterations}")
        print(f"Distinct ports:     {result.distinct_ports}")
        print(f"Leaked descriptors: {result.leaked_descriptors}")
        print(f"Elapsed:            {result.elapsed:.2f}s")
        for failure in result.failures[:10]:
            print(f"  {failure}")

    return 0 if result.passed else 1


if __name__ == '__main__':
    sys.exit(main())
