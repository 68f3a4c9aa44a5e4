import asyncio
import time
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Any
from collections import defaultdict
from urllib.parse import urlparse

import aiohttp
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..errors import RenderError

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Classification of render failures"""
    NETWORK_TIMEOUT = "network_timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_CLIENT_ERROR = "http_client_error"  # 4xx
    HTTP_SERVER_ERROR = "http_server_error"  # 5xx
    RATE_LIMITED = "rate_limited"  # 429
    NAVIGATION_ERROR = "navigation_error"
    UNKNOWN_ERROR = "unknown_error"


@dataclass
class ErrorInfo:
    """Information about a failed visit"""
    url: str
    depth: int
    error_type: ErrorType
    status_code: Optional[int]
    message: str
    timestamp: float
    response_time: Optional[float] = None


ErrorListener = Callable[[ErrorInfo], Any]


class ErrorHandler:
    """Records render failures and forwards them to registered listeners"""

    def __init__(self, listeners: Optional[List[ErrorListener]] = None):
        self.listeners: List[ErrorListener] = list(listeners or [])
        self.error_history: List[ErrorInfo] = []
        self.failed_urls: Dict[str, ErrorInfo] = {}

    def add_listener(self, listener: ErrorListener):
        self.listeners.append(listener)
        return self

    def classify_error(self, error: RenderError) -> ErrorType:
        """Classify a render failure into an error type"""
        cause = error.cause
        status_code = error.status_code

        if isinstance(cause, (asyncio.TimeoutError, PlaywrightTimeoutError)):
            return ErrorType.NETWORK_TIMEOUT
        elif isinstance(cause, aiohttp.ClientConnectorError):
            return ErrorType.CONNECTION_ERROR
        elif status_code:
            if status_code == 429:
                return ErrorType.RATE_LIMITED
            elif 400 <= status_code < 500:
                return ErrorType.HTTP_CLIENT_ERROR
            elif 500 <= status_code < 600:
                return ErrorType.HTTP_SERVER_ERROR

        message = error.detail.lower()
        if "timeout" in message:
            return ErrorType.NETWORK_TIMEOUT
        elif "net::err_" in message:
            return ErrorType.CONNECTION_ERROR
        elif "navigat" in message:
            return ErrorType.NAVIGATION_ERROR

        return ErrorType.UNKNOWN_ERROR

    def record_failure(self, error: RenderError, depth: int = 0,
                       response_time: Optional[float] = None) -> ErrorInfo:
        """Record a failed visit, log it and notify listeners"""
        error_type = self.classify_error(error)
        info = ErrorInfo(
            url=error.url,
            depth=depth,
            error_type=error_type,
            status_code=error.status_code,
            message=error.detail,
            timestamp=time.time(),
            response_time=response_time
        )

        self.error_history.append(info)
        self.failed_urls[error.url] = info

        logger.warning(f"Error visiting {error.url} at depth {depth}: {error_type.value} - {error.detail}")

        for listener in self.listeners:
            try:
                listener(info)
            except Exception as e:
                logger.error(f"Error listener {listener!r} failed for {error.url}: {e}")

        return info

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of all errors encountered"""
        if not self.error_history:
            return {"total_errors": 0}

        error_counts = defaultdict(int)
        domain_errors = defaultdict(int)

        for error in self.error_history:
            error_counts[error.error_type.value] += 1
            domain = urlparse(error.url).netloc.lower() or "unknown"
            domain_errors[domain] += 1

        return {
            "total_errors": len(self.error_history),
            "failed_urls": len(self.failed_urls),
            "error_types": dict(error_counts),
            "domain_errors": dict(domain_errors)
        }

    def get_failed_urls(self) -> List[str]:
        """Get URLs whose visit failed, in failure order"""
        return list(self.failed_urls.keys())

    def reset(self):
        self.error_history.clear()
        self.failed_urls.clear()
