# src/apod_archive_dataset/pipeline/enrich.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from apod_archive_dataset.data.records import (
    load_dataset,
    page_name_for_date,
    write_dataset,
    write_text_atomic,
)
from apod_archive_dataset.pipeline.config import ScrapingConfig, load_scraping_config
from apod_archive_dataset.scraping.explanation import extract_explanation
from apod_archive_dataset.scraping.http import create_session, fetch_with_retries
from apod_archive_dataset.utils.errors import FetchError, MalformedDateError
from apod_archive_dataset.utils.stats_utils import file_sha256, update_stage_stats

logger = logging.getLogger(__name__)


def needs_explanation(item: Dict[str, Any]) -> bool:
    value = item.get("explanation")
    return value is None or not str(value).strip()


def find_targets(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [it for it in items if needs_explanation(it)]


def enrich_dataset(
    cfg: Optional[ScrapingConfig] = None,
    session: Optional[requests.Session] = None,
) -> int:
    """
    Fill missing explanations in cfg.data_file in place.

    The pre-run text is copied to cfg.backup_file before the primary file is
    rewritten. Only records with an empty/missing explanation are fetched,
    so re-running is safe. Returns the number of records updated.
    """
    if cfg is None:
        cfg = load_scraping_config()

    # MissingFileError propagates: nothing to enrich
    original, items = load_dataset(cfg.data_file)

    targets = find_targets(items)
    logger.info(f"Total items: {len(items)}. Missing explanations: {len(targets)}.")

    if session is None:
        session = create_session(cfg)

    updated = missed = failed = malformed = 0
    for n, item in enumerate(targets, start=1):
        date = item.get("date")
        try:
            page_name = page_name_for_date(date)
        except MalformedDateError as e:
            logger.warning(f"[{n}/{len(targets)}] Skipping record: {e}")
            malformed += 1
            continue

        url = cfg.page_url(page_name)
        try:
            html = fetch_with_retries(session, url, cfg.enrich)
            explanation = extract_explanation(html)
            if explanation:
                item["explanation"] = explanation
                updated += 1
                logger.info(f"[{n}/{len(targets)}] Updated {updated}/{len(targets)} ({date})")
            else:
                missed += 1
                logger.info(f"[{n}/{len(targets)}] No explanation found for {date}")
        except FetchError as e:
            failed += 1
            logger.warning(f"[{n}/{len(targets)}] Fetch failed for {date} ({e.reason})")

        time.sleep(cfg.enrich.delay)

    logger.info("Backing up and writing file...")
    write_text_atomic(cfg.backup_file, original)
    write_dataset(cfg.data_file, items)
    logger.info(f"Done. Wrote {updated} explanation(s). Backup at {cfg.backup_file}")

    enrich_stats = {
        "total_items": len(items),
        "targets": len(targets),
        "updated": updated,
        "not_found": missed,
        "fetch_failed": failed,
        "malformed_date": malformed,
        "data_file": str(cfg.data_file),
        "sha256": file_sha256(cfg.data_file),
    }
    update_stage_stats("enrich", enrich_stats, stats_dir=cfg.stats_dir)

    return updated
