# src/apod_archive_dataset/scraping/archive_index.py
from __future__ import annotations

import logging
from typing import List

import requests
from bs4 import BeautifulSoup

from apod_archive_dataset.data.records import IDENTIFIER_RE, ArchiveLinkEntry
from apod_archive_dataset.pipeline.config import ScrapingConfig
from apod_archive_dataset.scraping.http import fetch_html

logger = logging.getLogger(__name__)


def parse_archive_links(html: str) -> List[ArchiveLinkEntry]:
    """
    Collect ap<yymmdd>.html anchors in document order. The archive's own
    ordering is kept as-is; nothing here sorts.
    """
    soup = BeautifulSoup(html, "lxml")

    links: List[ArchiveLinkEntry] = []
    for a in soup.find_all("a", href=True):
        href = a.get("href", "").strip()
        if not IDENTIFIER_RE.fullmatch(href):
            continue
        links.append(ArchiveLinkEntry(identifier=href, label=a.get_text().strip()))
    return links


def fetch_archive_links(session: requests.Session, cfg: ScrapingConfig) -> List[ArchiveLinkEntry]:
    url = cfg.archive_url
    logger.info(f"[Archive] Fetching index {url}")
    html = fetch_html(session, url, timeout=cfg.build.timeout)

    links = parse_archive_links(html)
    logger.info(f"[Archive] Found {len(links)} entries")
    return links
