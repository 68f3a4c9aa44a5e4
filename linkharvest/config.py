"""
Configuration - crawl settings loaded from the environment and browser setup
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "LINKHARVEST_"

DEFAULT_SEED_URL = "https://www.browserscan.net/"
DEFAULT_OUTPUT = "collected_links.csv"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)

DEFAULT_LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-infobars',
    '--window-position=0,0',
    '--ignore-certificate-errors',
    '--ignore-certificate-errors-spki-list',
    '--disable-dev-shm-usage',
    '--disable-software-rasterizer',
    '--disable-blink-features=AutomationControlled',
    '--disable-features=IsolateOrigins,site-per-process',
    '--disable-web-security'
]

RENDERER_CHOICES = ("browser", "http")


@dataclass
class Viewport:
    width: int = 1920
    height: int = 1080
    device_scale_factor: float = 1.0


@dataclass
class Geolocation:
    latitude: float = 9.6140
    longitude: float = 6.5568
    accuracy: float = 0.0


@dataclass
class PermissionOverride:
    """Browser permissions granted to a single origin"""
    origin: str = DEFAULT_SEED_URL
    permissions: List[str] = field(default_factory=lambda: ['geolocation'])


@dataclass
class PluginInfo:
    name: str
    filename: str = 'internal-pdf-viewer'
    description: str = 'Portable Document Format'


def _default_plugins() -> List[PluginInfo]:
    return [
        PluginInfo(name='Chrome PDF Viewer'),
        PluginInfo(name='Chromium PDF Viewer'),
        PluginInfo(name='Microsoft Edge PDF Viewer'),
    ]


@dataclass
class FingerprintOverrides:
    """Values patched into every document before its scripts run"""
    hide_webdriver: bool = True
    patch_permissions_query: bool = True
    webgl_vendor: Optional[str] = 'Google Inc. (Intel)'
    webgl_renderer: Optional[str] = (
        'ANGLE (Intel, Intel(R) HD Graphics 620 (0x00005916) Direct3D11 vs_5_0 ps_5_0, D3D11)'
    )
    plugins: List[PluginInfo] = field(default_factory=_default_plugins)


@dataclass
class BrowserConfig:
    """Browser and context setup consumed by the renderers

    Validated once on construction; has no effect on traversal.
    """
    headless: bool = True
    viewport: Viewport = None
    user_agent: str = DEFAULT_USER_AGENT
    extra_http_headers: Dict[str, str] = None
    timezone_id: Optional[str] = 'Africa/Lagos'
    geolocation: Optional[Geolocation] = None
    permissions: List[PermissionOverride] = None
    fingerprint: FingerprintOverrides = None
    launch_args: List[str] = None

    def __post_init__(self):
        if self.viewport is None:
            self.viewport = Viewport()
        if self.extra_http_headers is None:
            self.extra_http_headers = {'Accept-Language': 'en-US,en;q=0.9'}
        if self.geolocation is None:
            self.geolocation = Geolocation()
        if self.permissions is None:
            self.permissions = [PermissionOverride()]
        if self.fingerprint is None:
            self.fingerprint = FingerprintOverrides()
        if self.launch_args is None:
            self.launch_args = list(DEFAULT_LAUNCH_ARGS)
        self.validate()

    def validate(self):
        if self.viewport.width <= 0 or self.viewport.height <= 0:
            raise ConfigError(
                f"Viewport must be positive, got {self.viewport.width}x{self.viewport.height}"
            )
        if self.viewport.device_scale_factor <= 0:
            raise ConfigError("device_scale_factor must be positive")
        if not self.user_agent:
            raise ConfigError("user_agent must not be empty")
        if self.geolocation is not None:
            if not -90.0 <= self.geolocation.latitude <= 90.0:
                raise ConfigError(f"Latitude out of range: {self.geolocation.latitude}")
            if not -180.0 <= self.geolocation.longitude <= 180.0:
                raise ConfigError(f"Longitude out of range: {self.geolocation.longitude}")
            if self.geolocation.accuracy < 0:
                raise ConfigError("Geolocation accuracy must not be negative")
        for override in self.permissions:
            parsed = urlparse(override.origin)
            if parsed.scheme not in ('http', 'https') or not parsed.netloc:
                raise ConfigError(f"Permission origin must be an http(s) origin: {override.origin!r}")
            if not override.permissions:
                raise ConfigError(f"No permissions listed for {override.origin}")

    def for_origin(self, seed_url: str) -> 'BrowserConfig':
        """Point the default permission override at the seed's origin"""
        parsed = urlparse(seed_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            return self
        origin = f"{parsed.scheme}://{parsed.netloc}/"
        for override in self.permissions:
            if override.origin == DEFAULT_SEED_URL:
                override.origin = origin
        self.validate()
        return self


def _env(name: str, default=None):
    return os.environ.get(ENV_PREFIX + name, default)


def _parse_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off', ''):
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def _parse_number(name: str, value, kind):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{ENV_PREFIX}{name} must be {kind.__name__}, got {value!r}") from None


@dataclass
class CrawlSettings:
    """Process-level settings for a crawl run"""
    seed_url: str = DEFAULT_SEED_URL
    max_depth: int = 3
    output_path: str = DEFAULT_OUTPUT
    politeness_delay: float = 1.0
    render_timeout: float = 30.0
    renderer: str = "browser"
    headless: bool = True
    adaptive_backoff: bool = False
    log_dir: str = "crawl_data/logs"
    log_level: str = "INFO"
    report_interval: float = 30.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        if not self.seed_url:
            raise ConfigError("seed_url must not be empty")
        if self.max_depth < 0:
            raise ConfigError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.politeness_delay < 0:
            raise ConfigError(f"politeness_delay must be >= 0, got {self.politeness_delay}")
        if self.render_timeout <= 0:
            raise ConfigError(f"render_timeout must be positive, got {self.render_timeout}")
        if self.report_interval <= 0:
            raise ConfigError(f"report_interval must be positive, got {self.report_interval}")
        if self.renderer not in RENDERER_CHOICES:
            raise ConfigError(f"renderer must be one of {RENDERER_CHOICES}, got {self.renderer!r}")
        if not self.output_path:
            raise ConfigError("output_path must not be empty")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'CrawlSettings':
        """Build settings from LINKHARVEST_* variables, loading a .env file first

        Variables already present in the environment win over the file.
        """
        loaded = load_dotenv(env_file) if env_file else load_dotenv()
        if loaded:
            logger.debug(f"Loaded environment from {env_file or '.env'}")

        defaults = cls.__dataclass_fields__
        return cls(
            seed_url=_env('SEED_URL', defaults['seed_url'].default),
            max_depth=_parse_number('MAX_DEPTH', _env('MAX_DEPTH', defaults['max_depth'].default), int),
            output_path=_env('OUTPUT', defaults['output_path'].default),
            politeness_delay=_parse_number(
                'POLITENESS_DELAY', _env('POLITENESS_DELAY', defaults['politeness_delay'].default), float
            ),
            render_timeout=_parse_number(
                'RENDER_TIMEOUT', _env('RENDER_TIMEOUT', defaults['render_timeout'].default), float
            ),
            renderer=_env('RENDERER', defaults['renderer'].default).strip().lower(),
            headless=_parse_bool('HEADLESS', _env('HEADLESS', defaults['headless'].default)),
            adaptive_backoff=_parse_bool(
                'ADAPTIVE_BACKOFF', _env('ADAPTIVE_BACKOFF', defaults['adaptive_backoff'].default)
            ),
            log_dir=_env('LOG_DIR', defaults['log_dir'].default),
            log_level=_env('LOG_LEVEL', defaults['log_level'].default),
            report_interval=_parse_number(
                'REPORT_INTERVAL', _env('REPORT_INTERVAL', defaults['report_interval'].default), float
            ),
        )

    def browser_config(self) -> BrowserConfig:
        """Browser setup for this run, with permissions scoped to the seed origin"""
        return BrowserConfig(headless=self.headless).for_origin(self.seed_url)
