"""
Output sinks for collected URLs
"""

from .base import OutputSink
from .csv_sink import CSVSink

__all__ = [
    'OutputSink',
    'CSVSink'
]
