# src/apod_archive_dataset/scraping/page_parser.py
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from apod_archive_dataset.data.records import (
    MEDIA_IMAGE,
    MEDIA_UNKNOWN,
    MEDIA_VIDEO,
    Record,
    date_from_identifier,
)
from apod_archive_dataset.pipeline.config import ScrapingConfig
from apod_archive_dataset.scraping.http import fetch_html
from apod_archive_dataset.utils.errors import FetchError

logger = logging.getLogger(__name__)

COPYRIGHT_RE = re.compile(r"Copyright[: ]([^<\n]+)", re.IGNORECASE)
DEFAULT_TITLE = "Untitled"
DEFAULT_VIDEO_HOSTS = ("youtube", "vimeo")


# ---------- field extractors (missing structure -> default value) ----------

def extract_title(soup: BeautifulSoup) -> str:
    b = soup.find("b")
    if b is None:
        return DEFAULT_TITLE
    return b.get_text().strip() or DEFAULT_TITLE


def extract_build_explanation(soup: BeautifulSoup) -> str:
    """
    Text of the element following the parent of a <b>Explanation</b> label.
    Later matches overwrite earlier ones.
    """
    explanation = ""
    for b in soup.find_all("b"):
        if "Explanation" not in b.get_text():
            continue
        parent = b.parent
        sibling = parent.find_next_sibling() if parent is not None else None
        if sibling is not None:
            explanation = sibling.get_text().strip()
    return explanation


def extract_media(
    soup: BeautifulSoup,
    page_url: str,
    video_hosts: Iterable[str] = DEFAULT_VIDEO_HOSTS,
) -> Tuple[str, str]:
    """
    Return (media_type, url).
    """
    img = soup.find("img")
    if img is not None:
        return MEDIA_IMAGE, urljoin(page_url, img.get("src", "").strip())

    iframe = soup.find("iframe")
    if iframe is not None:
        src = iframe.get("src", "").strip()
        if any(host in src for host in video_hosts):
            return MEDIA_VIDEO, src

    return MEDIA_UNKNOWN, ""


def extract_copyright(html: str) -> str:
    m = COPYRIGHT_RE.search(html)
    return m.group(1).strip() if m else ""


# ---------- page ----------

def parse_page_html(
    html: str,
    identifier: str,
    base_url: str,
    video_hosts: Iterable[str] = DEFAULT_VIDEO_HOSTS,
) -> Record:
    soup = BeautifulSoup(html, "lxml")
    media_type, media_url = extract_media(soup, base_url + identifier, video_hosts)

    return Record(
        date=date_from_identifier(identifier),
        title=extract_title(soup),
        explanation=extract_build_explanation(soup),
        media_type=media_type,
        url=media_url,
        hdurl=media_url,
        copyright=extract_copyright(html),
    )


def parse_apod_page(
    session: requests.Session,
    identifier: str,
    cfg: ScrapingConfig,
) -> Optional[Record]:
    """
    Fetch and parse one per-day page. Any failure is logged and yields None.
    """
    url = cfg.page_url(identifier)
    try:
        html = fetch_html(session, url, timeout=cfg.build.timeout)
        return parse_page_html(html, identifier, cfg.base_url, cfg.video_hosts)
    except FetchError as e:
        logger.warning(f"Skipping {identifier}: {e.reason}")
    except Exception as e:
        logger.warning(f"Skipping {identifier}: {e}", exc_info=True)
    return None
