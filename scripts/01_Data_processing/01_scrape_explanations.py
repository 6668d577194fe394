#!/usr/bin/env python3
"""
01_scrape_explanations.py

Fills missing "explanation" fields in data/data.json by scraping
https://apod.nasa.gov/apod/apYYMMDD.html for each item missing it.

- Creates a backup: data/data.json.bak (the file as it was before this run)
- Safe to re-run: only fills where explanation is empty/missing
- Throttled, with linear-backoff retries
- Updates stats/apod.json with enrich_stats
"""

import argparse
import sys
import time
from pathlib import Path

from apod_archive_dataset.pipeline.config import PROJECT_ROOT, load_scraping_config
from apod_archive_dataset.pipeline.enrich import enrich_dataset
from apod_archive_dataset.utils.errors import MissingFileError
from apod_archive_dataset.utils.logging_utils import create_logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape missing APOD explanations.")
    parser.add_argument("--config", default=None, help="Path to scraping.yaml")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    log_dir = PROJECT_ROOT / "data" / "logs" / "scraping"
    logger, log_path = create_logger(log_dir=log_dir, script_name="01_scrape_explanations")

    start = time.time()
    logger.info("=== Starting 01_scrape_explanations ===")

    try:
        cfg = load_scraping_config(Path(args.config) if args.config else None)
        updated = enrich_dataset(cfg)
    except MissingFileError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unhandled error in 01_scrape_explanations: {e}", exc_info=True)
        raise

    elapsed = time.time() - start
    logger.info(f"Finished 01_scrape_explanations in {elapsed:.2f} seconds")
    logger.info(f"Updated explanations: {updated}")
    logger.info(f"Log file: {log_path}")

    print(f"Updated {updated} explanation(s) in: {cfg.data_file}")
    print(f"Log saved to: {log_path}")


if __name__ == "__main__":
    main()
