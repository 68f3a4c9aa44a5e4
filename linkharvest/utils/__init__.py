"""
Utility modules for web crawling
"""

from .error_handler import ErrorHandler, ErrorInfo, ErrorType
from .rate_limiter import RateLimiter
from .url_filter import is_absolute_http_url

__all__ = [
    'ErrorHandler',
    'ErrorInfo',
    'ErrorType',
    'RateLimiter',
    'is_absolute_http_url'
]
