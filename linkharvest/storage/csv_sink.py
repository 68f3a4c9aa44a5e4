import csv
import io
import logging
from pathlib import Path
from typing import Sequence

import aiofiles

from .base import OutputSink
from ..errors import SinkError

logger = logging.getLogger(__name__)

CSV_HEADER = 'URL'


class CSVSink(OutputSink):
    """Writes collected URLs as a single-column CSV file"""

    def __init__(self, path='collected_links.csv'):
        self.path = Path(path)

    @staticmethod
    def render(urls: Sequence[str]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow([CSV_HEADER])
        for url in urls:
            writer.writerow([url])
        return buffer.getvalue()

    async def write(self, urls: Sequence[str]) -> None:
        content = self.render(urls)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.path, 'w', encoding='utf-8', newline='') as f:
                await f.write(content)
        except OSError as e:
            raise SinkError(self.path, e) from e

        logger.info(f"Wrote {len(urls)} URLs to {self.path}")
