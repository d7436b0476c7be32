#!/usr/bin/env python3
"""Refresh the local CSV cache from the model size sheet.

Usage:
    python -m scripts.update_data              # Download and overwrite data/data.csv
    python -m scripts.update_data --verbose    # Also print the summary as JSON
"""

import argparse
import sys
from pathlib import Path
import logging

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from llm_sizes.config import ensure_dirs
from llm_sizes.ingestors import GoogleSheetIngestor

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Refresh cached model size data")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ensure_dirs()
    ingestor = GoogleSheetIngestor()
    try:
        summary = ingestor.run()
    except Exception as e:
        logger.exception(f"{ingestor.SOURCE_ID} download failed: {e}")
        return 1

    logger.info(f"{summary.rows} rows cached at {summary.cache_path}")
    if args.verbose:
        print(summary.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
