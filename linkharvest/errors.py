"""
Exception types shared by the crawler, renderers and sinks
"""

from typing import Optional


class CrawlerError(Exception):
    """Base class for all linkharvest errors"""


class ConfigError(CrawlerError, ValueError):
    """Invalid crawl settings or browser configuration"""


class RenderError(CrawlerError):
    """A single page could not be visited or its links could not be read"""

    def __init__(self, url: str, cause: Optional[BaseException] = None,
                 status_code: Optional[int] = None, message: Optional[str] = None):
        self.url = url
        self.cause = cause
        self.status_code = status_code
        if message:
            detail = message
        elif cause is not None:
            detail = str(cause) or type(cause).__name__
        else:
            detail = "render failed"
        self.detail = detail
        super().__init__(f"{url}: {detail}")


class SinkError(CrawlerError):
    """The collected URLs could not be written to the output"""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")
