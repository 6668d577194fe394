#!/usr/bin/env python3
"""
00_build_dataset.py

Builds the full APOD dataset (1995 onwards) from the HTML archive:
- Reads configs/scraping.yaml
- Fetches the archive index and every per-day page (politely paced)
- Writes data/data_partial.json every `checkpoint_every` entries
- Writes data/data.json sorted newest -> oldest
- Updates stats/apod.json with build_stats
"""

import argparse
import time
from pathlib import Path

from apod_archive_dataset.pipeline.build_dataset import build_dataset
from apod_archive_dataset.pipeline.config import PROJECT_ROOT, load_scraping_config
from apod_archive_dataset.utils.logging_utils import create_logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the APOD dataset from the HTML archive.")
    parser.add_argument("--config", default=None, help="Path to scraping.yaml")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Only process the last N archive entries (trial runs).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    log_dir = PROJECT_ROOT / "data" / "logs" / "scraping"
    logger, log_path = create_logger(log_dir=log_dir, script_name="00_build_dataset")

    start = time.time()
    logger.info("=== Starting 00_build_dataset ===")

    try:
        cfg = load_scraping_config(Path(args.config) if args.config else None)
        out_path = build_dataset(cfg, limit=args.limit)
    except Exception as e:
        logger.error(f"Unhandled error in 00_build_dataset: {e}", exc_info=True)
        raise

    elapsed = time.time() - start
    logger.info(f"Finished 00_build_dataset in {elapsed:.2f} seconds")
    logger.info(f"Dataset: {out_path}")
    logger.info(f"Log file: {log_path}")

    print(f"Saved dataset to: {out_path}")
    print(f"Log saved to: {log_path}")


if __name__ == "__main__":
    main()
