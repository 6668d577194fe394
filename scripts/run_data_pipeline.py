#!/usr/bin/env python3
from __future__ import annotations

import argparse
import subprocess
from pathlib import Path
import sys

from apod_archive_dataset.utils.logging_utils import create_logger


def run(cmd: list[str], logger):
    logger.info(f"=== Running: {' '.join(cmd)} ===")
    result = subprocess.run(cmd)
    if result.returncode != 0:
        logger.error(f"Failed: {' '.join(cmd)} (returncode={result.returncode})")
        sys.exit(result.returncode)
    logger.info(f"Finished: {' '.join(cmd)}")


def main():
    parser = argparse.ArgumentParser(description="Build the APOD dataset, then fill missing explanations.")
    parser.add_argument("--config", default=None)
    parser.add_argument("--limit", type=int, default=None)
    args = parser.parse_args()

    repo_root = Path(__file__).resolve().parents[1]
    scripts_dir = repo_root / "scripts"

    log_dir = repo_root / "data" / "logs" / "data_pipeline"
    logger, _ = create_logger(log_dir, script_name="data_pipeline")

    data_dir = scripts_dir / "01_Data_processing"
    build_script = data_dir / "00_build_dataset.py"
    explanations_script = data_dir / "01_scrape_explanations.py"

    common = ["--config", args.config] if args.config else []
    build_extra = ["--limit", str(args.limit)] if args.limit else []

    run([sys.executable, str(build_script), *common, *build_extra], logger)
    run([sys.executable, str(explanations_script), *common], logger)

    logger.info("DATA PIPELINE COMPLETED SUCCESSFULLY")


if __name__ == "__main__":
    main()
