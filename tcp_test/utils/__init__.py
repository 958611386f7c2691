"""
Utility functions and helpers for tcp-test.
"""

from .resources import open_descriptor_count, DescriptorTracker

__all__ = [
    'open_descriptor_count',
    'DescriptorTracker'
]
