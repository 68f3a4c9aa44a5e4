"""
Shared fakes for crawler tests
"""

import logging
import sys
from pathlib import Path

import pytest

root = Path(__file__).parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from linkharvest.errors import RenderError, SinkError
from linkharvest.renderer.base import Renderer
from linkharvest.storage.base import OutputSink

SETTINGS_ENV_KEYS = [
    'SEED_URL', 'MAX_DEPTH', 'OUTPUT', 'POLITENESS_DELAY', 'RENDER_TIMEOUT',
    'RENDERER', 'HEADLESS', 'ADAPTIVE_BACKOFF', 'LOG_DIR', 'LOG_LEVEL', 'REPORT_INTERVAL',
]


class FakeRenderer(Renderer):
    """Serves links from an in-memory graph and records every call"""

    def __init__(self, graph=None, failing=None, errors=None, on_visit=None):
        self.graph = graph or {}
        self.failing = set(failing or [])
        self.errors = errors or {}
        self.on_visit = on_visit
        self.calls = []
        self.started = 0
        self.closed = 0

    async def start(self):
        self.started += 1

    async def close(self):
        self.closed += 1

    async def visit_and_extract_links(self, url):
        self.calls.append(url)
        if self.on_visit:
            self.on_visit(url)
        if url in self.errors:
            raise self.errors[url]
        if url in self.failing:
            raise RenderError(url, message="navigation timeout")
        return list(self.graph.get(url, []))


class FakeSink(OutputSink):
    def __init__(self, fail=False):
        self.fail = fail
        self.writes = []
        self.path = "memory.csv"

    async def write(self, urls):
        self.writes.append(list(urls))
        if self.fail:
            raise SinkError(self.path, OSError("disk full"))


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove LINKHARVEST_* variables, including any a .env file adds during the test"""
    for key in SETTINGS_ENV_KEYS:
        monkeypatch.setenv('LINKHARVEST_' + key, 'unset')
        monkeypatch.delenv('LINKHARVEST_' + key)
    return monkeypatch


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
