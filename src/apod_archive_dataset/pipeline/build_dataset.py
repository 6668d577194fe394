# src/apod_archive_dataset/pipeline/build_dataset.py
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests

from apod_archive_dataset.data.records import (
    ArchiveLinkEntry,
    sort_records_desc,
    write_dataset,
)
from apod_archive_dataset.pipeline.config import ScrapingConfig, load_scraping_config
from apod_archive_dataset.scraping.archive_index import fetch_archive_links
from apod_archive_dataset.scraping.http import create_session
from apod_archive_dataset.scraping.page_parser import parse_apod_page
from apod_archive_dataset.utils.stats_utils import file_sha256, update_stage_stats

logger = logging.getLogger(__name__)


def write_checkpoint(path: Path, records: Sequence[Dict[str, Any]]) -> Path:
    """
    Advisory snapshot of the accumulator; never read back by the pipeline.
    """
    return write_dataset(path, records)


def select_entries(links: List[ArchiveLinkEntry], limit: Optional[int]) -> List[ArchiveLinkEntry]:
    # limit keeps the last N archive entries, handy for trial runs
    if limit is None or limit <= 0:
        return links
    return links[-limit:]


def collect_records(
    session: requests.Session,
    entries: Sequence[ArchiveLinkEntry],
    cfg: ScrapingConfig,
) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    total = len(entries)
    skipped = 0

    for i, entry in enumerate(entries, start=1):
        record = parse_apod_page(session, entry.identifier, cfg)
        if record is not None:
            records.append(record.to_dict())
        else:
            skipped += 1

        if i % cfg.checkpoint_every == 0:
            logger.info(f"[Progress] Processed {i}/{total} (saved={len(records)}, skipped={skipped})")
            write_checkpoint(cfg.partial_file, records)

        # polite delay after every attempt, success or not
        time.sleep(cfg.build.delay)

    return records


def build_dataset(
    cfg: Optional[ScrapingConfig] = None,
    session: Optional[requests.Session] = None,
    limit: Optional[int] = None,
) -> Path:
    """
    Full rebuild: archive index -> every per-day page -> sorted dataset.
    Overwrites cfg.data_file without taking a backup. Returns its path.
    """
    if cfg is None:
        cfg = load_scraping_config()
    if session is None:
        session = create_session(cfg)

    links = fetch_archive_links(session, cfg)
    entries = select_entries(links, limit)
    logger.info(f"Processing {len(entries)} of {len(links)} archive entries")

    records = collect_records(session, entries, cfg)
    records = sort_records_desc(records)

    out_path = write_dataset(cfg.data_file, records)
    logger.info(f"Saved {len(records)} entries to {out_path}")

    build_stats = {
        "archive_entries": len(links),
        "processed": len(entries),
        "saved": len(records),
        "skipped": len(entries) - len(records),
        "data_file": str(out_path),
        "sha256": file_sha256(out_path),
    }
    logger.info(f"Build stats: {build_stats}")
    update_stage_stats("build", build_stats, stats_dir=cfg.stats_dir)

    return out_path
