"""CLI script to download the model size sheet and render the chart.

Usage:
    python -m llm_sizes.cli.make_chart [--skip-download] [--output PATH] [--verbose]

Examples:
    # Download, transform and render (same as running with no flags)
    python -m llm_sizes.cli.make_chart

    # Re-render from the existing cache without touching the network
    python -m llm_sizes.cli.make_chart --skip-download
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from llm_sizes.charts import build_chart, export_chart
from llm_sizes.config import settings, get_absolute_path, ensure_dirs
from llm_sizes.ingestors import GoogleSheetIngestor
from llm_sizes.transform import read_cache, transform

logger = logging.getLogger(__name__)


def run_pipeline(
    output: Path | None = None,
    cache_path: Path | None = None,
    skip_download: bool = False,
    ingestor: GoogleSheetIngestor | None = None,
) -> dict:
    """Run loader, transformer and renderer in sequence.

    Any failure propagates to the caller.

    Args:
        output: PNG path (default: settings.output_file)
        cache_path: CSV cache path (default: settings.cache_file)
        skip_download: Reuse the existing cache instead of downloading
        ingestor: Ingestor to use for the download

    Returns:
        Summary dict with row counts and output path
    """
    output = output or get_absolute_path(settings.output_file)
    cache_path = cache_path or get_absolute_path(settings.cache_file)

    if skip_download:
        logger.info(f"Skipping download, using cache {cache_path}")
        fetched = None
    else:
        ingestor = ingestor or GoogleSheetIngestor(cache_path=cache_path)
        fetched = ingestor.run().rows

    cached = read_cache(cache_path)
    df = transform(cached)

    fig = build_chart(df, settings.chart)
    export_chart(fig, output, settings.chart)

    return {
        "fetched": fetched,
        "cached": len(cached),
        "plotted": len(df),
        "output": str(output),
    }


def main():
    parser = argparse.ArgumentParser(
        description="Render the language model size chart"
    )
    parser.add_argument(
        "--skip-download",
        action="store_true",
        help="Use the cached CSV instead of downloading the sheet",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help=f"Output PNG (default: {settings.output_file})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    logger.info(f"Chart run started at {datetime.utcnow().isoformat()}")
    ensure_dirs()

    try:
        result = run_pipeline(output=args.output, skip_download=args.skip_download)
    except Exception as e:
        logger.exception(f"Chart run failed: {e}")
        return 1

    logger.info(f"Plotted {result['plotted']}/{result['cached']} models to {result['output']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
