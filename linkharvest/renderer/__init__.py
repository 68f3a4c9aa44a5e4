"""
Renderers - load pages and report their outbound links
"""

from .base import Renderer
from .browser_renderer import PlaywrightRenderer
from .http_renderer import HTTPRenderer
from .stealth import build_init_script

__all__ = [
    'Renderer',
    'PlaywrightRenderer',
    'HTTPRenderer',
    'build_init_script'
]
