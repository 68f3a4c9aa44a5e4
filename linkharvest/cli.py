"""
Command-line interface for the crawler
"""

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace
from typing import List, Optional

from .config import CrawlSettings, RENDERER_CHOICES
from .crawler import CrawlerBuilder, CancellationToken
from .errors import ConfigError, SinkError
from .monitoring import LogManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SINK_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkharvest",
        description="Breadth-first crawl from a seed URL, writing every visited URL to a CSV file."
    )
    parser.add_argument("seed_url", nargs="?", help="Crawl origin (default: LINKHARVEST_SEED_URL)")
    parser.add_argument("--max-depth", type=int, help="Deepest level whose links are still followed")
    parser.add_argument("--output", "-o", help="CSV output path")
    parser.add_argument("--delay", type=float, help="Politeness delay between visits, in seconds")
    parser.add_argument("--timeout", type=float, help="Per-page render timeout, in seconds")
    parser.add_argument("--renderer", choices=RENDERER_CHOICES, help="Headless browser or plain HTTP")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--adaptive-backoff", action="store_true",
                        help="Grow the delay after failed visits")
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--log-level", help="Console log level")
    parser.add_argument("--no-monitoring", action="store_true",
                        help="Disable progress reports and metrics export")
    return parser


def settings_from_args(args: argparse.Namespace) -> CrawlSettings:
    """Environment settings with command-line overrides applied"""
    settings = CrawlSettings.from_env(args.env_file)

    overrides = {}
    if args.seed_url:
        overrides['seed_url'] = args.seed_url
    if args.max_depth is not None:
        overrides['max_depth'] = args.max_depth
    if args.output:
        overrides['output_path'] = args.output
    if args.delay is not None:
        overrides['politeness_delay'] = args.delay
    if args.timeout is not None:
        overrides['render_timeout'] = args.timeout
    if args.renderer:
        overrides['renderer'] = args.renderer
    if args.headed:
        overrides['headless'] = False
    if args.adaptive_backoff:
        overrides['adaptive_backoff'] = True
    if args.log_level:
        overrides['log_level'] = args.log_level

    # replace() re-runs validation through __post_init__
    return replace(settings, **overrides) if overrides else settings


def _install_signal_handlers(token: CancellationToken, loop=None):
    """First SIGINT/SIGTERM cancels cooperatively, a second one aborts"""
    loop = loop or asyncio.get_running_loop()
    signals = (signal.SIGINT, signal.SIGTERM)

    def on_signal(sig):
        token.cancel(f"received {sig.name}")
        # Restore default handling so a second signal interrupts a hung render
        for s in signals:
            loop.remove_signal_handler(s)

    for sig in signals:
        try:
            loop.add_signal_handler(sig, on_signal, sig)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform; KeyboardInterrupt still ends the run
            pass


async def run(settings: CrawlSettings, monitoring: bool = True) -> int:
    log_manager = LogManager(log_dir=settings.log_dir, log_level=settings.log_level)

    token = CancellationToken()
    _install_signal_handlers(token)

    builder = CrawlerBuilder.from_settings(settings, log_manager if monitoring else None)
    crawler = builder.with_cancellation(token).build()

    try:
        result = await crawler.crawl()
    except SinkError as e:
        logger.error(f"Crawl output failed: {e}")
        return EXIT_SINK_ERROR
    else:
        failed = result.failed_urls
        if failed:
            logger.warning(f"{len(failed)} pages could not be visited")
        logger.info(f"Collected {len(result.urls)} URLs into {result.output_path}")
        return EXIT_OK
    finally:
        log_manager.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        sys.stderr.write(f"linkharvest: error: {e}\n")
        return EXIT_CONFIG_ERROR

    return asyncio.run(run(settings, monitoring=not args.no_monitoring))


if __name__ == "__main__":
    sys.exit(main())
