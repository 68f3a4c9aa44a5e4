#!/usr/bin/env python3
"""
Basic crawling example
Crawls two levels deep from a seed with the headless browser and writes a CSV
"""

import asyncio
import sys
import os

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from linkharvest import CrawlerBuilder


async def main():
    print("Basic Crawling Example")
    print("=" * 50)

    failures = []

    crawler = (CrawlerBuilder('https://example.com/')
               .max_depth(2)
               .with_browser()
               .politeness_delay(1.0)
               .output('crawl_data/example_links.csv')
               .on_error(failures.append)
               .build())

    result = await crawler.crawl()

    print(f"\nVisited {len(result.urls)} pages, {len(failures)} failed")
    for url in result.urls:
        print(f"  {url}")
    for info in failures:
        print(f"  FAILED {info.url}: {info.error_type.value}")


if __name__ == "__main__":
    asyncio.run(main())
