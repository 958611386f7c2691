"""
Evaluation tools for tcp-test.
"""

from .stress import StressResult, ExchangeError, run_stress, exchange_payload

__all__ = ['StressResult', 'ExchangeError', 'run_stress', 'exchange_payload']
