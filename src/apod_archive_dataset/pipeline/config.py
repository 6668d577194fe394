from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


# Project root = directory holding configs/, data/ and src/
PROJECT_ROOT = Path(__file__).resolve().parents[3]


@dataclass
class PacingConfig:
    delay: float       # seconds slept after every page attempt
    timeout: float     # per-request timeout in seconds
    retries: int = 1   # attempts per page, 1 = no retry
    backoff: float = 0.0  # linear backoff unit, sleep = backoff * attempt


@dataclass
class ScrapingConfig:
    base_url: str
    archive_page: str = "archivepixFull.html"
    data_file: Path = PROJECT_ROOT / "data" / "data.json"
    partial_file: Path = PROJECT_ROOT / "data" / "data_partial.json"
    backup_file: Path = PROJECT_ROOT / "data" / "data.json.bak"
    stats_dir: Path = PROJECT_ROOT / "stats"
    checkpoint_every: int = 50
    user_agent: str = "Mozilla/5.0 (compatible; APOD-Scraper/1.0)"
    video_hosts: List[str] = field(default_factory=lambda: ["youtube", "vimeo"])
    build: PacingConfig = field(default_factory=lambda: PacingConfig(delay=0.5, timeout=10))
    enrich: PacingConfig = field(
        default_factory=lambda: PacingConfig(delay=0.2, timeout=20, retries=3, backoff=0.4)
    )

    @property
    def archive_url(self) -> str:
        return self.base_url + self.archive_page

    def page_url(self, identifier: str) -> str:
        return self.base_url + identifier


def _resolve_path(value: Optional[str], default: Path, root: Path) -> Path:
    if not value:
        return default
    path = Path(value)
    return path if path.is_absolute() else root / path


def _load_pacing(raw: Dict[str, Any], default: PacingConfig) -> PacingConfig:
    return PacingConfig(
        delay=float(raw.get("delay", default.delay)),
        timeout=float(raw.get("timeout", default.timeout)),
        retries=max(1, int(raw.get("retries", default.retries))),
        backoff=float(raw.get("backoff", default.backoff)),
    )


def load_scraping_config(config_path: Optional[Path] = None, root: Optional[Path] = None) -> ScrapingConfig:
    """
    Load configs/scraping.yaml from project root unless overridden.

    Relative artifact paths are resolved against `root` (project root by default).
    """
    if config_path is None:
        config_path = PROJECT_ROOT / "configs" / "scraping.yaml"
    if root is None:
        root = PROJECT_ROOT

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    if "base_url" not in cfg:
        raise ValueError("'base_url' must be defined in configs/scraping.yaml")

    defaults = ScrapingConfig(base_url="")
    return ScrapingConfig(
        base_url=cfg["base_url"].rstrip("/") + "/",
        archive_page=cfg.get("archive_page") or defaults.archive_page,
        data_file=_resolve_path(cfg.get("data_file"), root / "data" / "data.json", root),
        partial_file=_resolve_path(cfg.get("partial_file"), root / "data" / "data_partial.json", root),
        backup_file=_resolve_path(cfg.get("backup_file"), root / "data" / "data.json.bak", root),
        stats_dir=_resolve_path(cfg.get("stats_dir"), root / "stats", root),
        checkpoint_every=max(1, int(cfg.get("checkpoint_every", defaults.checkpoint_every))),
        user_agent=cfg.get("user_agent") or defaults.user_agent,
        video_hosts=list(cfg.get("video_hosts") or defaults.video_hosts),
        build=_load_pacing(cfg.get("build") or {}, defaults.build),
        enrich=_load_pacing(cfg.get("enrich") or {}, defaults.enrich),
    )
