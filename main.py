#!/usr/bin/env python3
"""
linkharvest
Breadth-first link crawler that records every visited URL to CSV
"""

import sys
from linkharvest.cli import main

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nCrawler stopped by user")
        sys.exit(130)
