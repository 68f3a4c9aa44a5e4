import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, List, Optional

from ..utils.error_handler import ErrorInfo

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
VISIT_LOGGER = 'linkharvest.visits'


class LogManager:
    """Routes crawl logging to the console and to per-day files in log_dir

    linkharvest_<date>.log         every record at the configured level
    linkharvest_errors_<date>.log  warnings and errors, failed visits included
    visits_<date>.jsonl            one JSON object per visit attempt

    Each visits line carries timestamp, event_type, url and depth. A
    'page_visited' event adds response_time, links_found and links_enqueued;
    a 'failed_visit' event adds error_type, status_code, message and
    response_time.
    """

    def __init__(self, log_dir: str = "crawl_data/logs", log_level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_level = getattr(logging, log_level.upper())
        self.date_stamp = datetime.now().strftime('%Y%m%d')

        self.handlers: List[logging.Handler] = []
        self.visit_handler: Optional[logging.Handler] = None
        self.visit_logger = logging.getLogger(VISIT_LOGGER)

        self.setup_logging()

    def log_path(self, name: str, suffix: str = "log") -> Path:
        return self.log_dir / f"{name}_{self.date_stamp}.{suffix}"

    def setup_logging(self):
        """Replace the root handlers with console, full and error handlers"""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

        self.handlers = [
            console_handler,
            self._file_handler(self.log_path("linkharvest"), self.log_level),
            self._file_handler(self.log_path("linkharvest_errors"), logging.WARNING),
        ]
        for handler in self.handlers:
            root_logger.addHandler(handler)

        # Visit events are data, not diagnostics: own file, bare JSON lines
        self.visit_handler = logging.FileHandler(self.log_path("visits", "jsonl"), encoding='utf-8')
        self.visit_handler.setFormatter(logging.Formatter('%(message)s'))
        self.visit_logger.handlers.clear()
        self.visit_logger.setLevel(logging.INFO)
        self.visit_logger.addHandler(self.visit_handler)
        self.visit_logger.propagate = False

    def _file_handler(self, path: Path, level: int) -> logging.Handler:
        handler = logging.FileHandler(path, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler

    def close(self):
        """Detach and close the handlers installed by this manager"""
        root_logger = logging.getLogger()
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = []

        if self.visit_handler:
            self.visit_logger.removeHandler(self.visit_handler)
            self.visit_handler.close()
            self.visit_handler = None

    def log_visit(self, url: str, depth: int, response_time: float,
                  links_found: int, links_enqueued: int):
        self._write_visit_event('page_visited', url, depth,
                                response_time=round(response_time, 4),
                                links_found=links_found,
                                links_enqueued=links_enqueued)

    def log_failed_visit(self, info: ErrorInfo):
        response_time = round(info.response_time, 4) if info.response_time is not None else None
        self._write_visit_event('failed_visit', info.url, info.depth,
                                error_type=info.error_type.value,
                                status_code=info.status_code,
                                message=info.message,
                                response_time=response_time)

    def _write_visit_event(self, event_type: str, url: str, depth: int, **fields):
        event = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'url': url,
            'depth': depth,
            **fields
        }
        self.visit_logger.info(json.dumps(event, default=str))

    def export_metrics_json(self, metrics_data: Dict[str, Any], filename: Optional[str] = None) -> Path:
        """Write a metrics report as JSON into log_dir"""
        if filename is None:
            filename = f"crawl_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

        export_path = self.log_dir / filename
        with open(export_path, 'w', encoding='utf-8') as f:
            json.dump(metrics_data, f, indent=2, default=str)

        logging.getLogger(__name__).info(f"Crawl report written to {export_path}")
        return export_path
