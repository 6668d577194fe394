# src/apod_archive_dataset/scraping/http.py
from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from apod_archive_dataset.pipeline.config import PacingConfig, ScrapingConfig
from apod_archive_dataset.utils.errors import FetchError

logger = logging.getLogger(__name__)


# ---------------------- SESSION ----------------------


def create_session(cfg: ScrapingConfig) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": cfg.user_agent,
            "Accept": "text/html,*/*",
        }
    )
    return session


# ---------------------- FETCH ----------------------


def fetch_html(session: requests.Session, url: str, timeout: Optional[float] = 20) -> str:
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise FetchError(url, f"HTTP {status}") from e
    except requests.RequestException as e:
        raise FetchError(url, str(e) or type(e).__name__) from e

    if not resp.text or not resp.text.strip():
        raise FetchError(url, "Empty HTML")
    return resp.text


def fetch_with_retries(session: requests.Session, url: str, pacing: PacingConfig) -> str:
    """
    Fetch `url`, retrying up to pacing.retries attempts with linear backoff
    (pacing.backoff * attempt seconds) between failures. Raises the last
    FetchError once the attempts are exhausted.
    """
    for attempt in range(1, pacing.retries + 1):
        try:
            return fetch_html(session, url, timeout=pacing.timeout)
        except FetchError as e:
            if attempt == pacing.retries:
                raise
            logger.debug(f"Attempt {attempt}/{pacing.retries} failed for {url}: {e.reason}")
            time.sleep(pacing.backoff * attempt)
    raise FetchError(url, "no attempts made")
