# src/apod_archive_dataset/utils/stats_utils.py
from __future__ import annotations

import hashlib
import json
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Optional

from apod_archive_dataset.pipeline.config import PROJECT_ROOT


STATS_DIR = PROJECT_ROOT / "stats"
STATS_NAME = "apod"
DIST_NAME = "apod-archive-dataset"


def get_run_info() -> Dict[str, Optional[str]]:
    """
    Installed package version (None when running from an uninstalled tree)
    and the time the stats block was written.
    """
    try:
        pkg_version: Optional[str] = version(DIST_NAME)
    except PackageNotFoundError:
        pkg_version = None
    return {
        "version": pkg_version,
        "timestamp": datetime.now().isoformat(timespec="seconds"),
    }


def _stats_path(name: str, stats_dir: Optional[Path] = None) -> Path:
    """
    e.g. stats/apod.json
    """
    safe_name = name.replace(" ", "-")
    return (stats_dir or STATS_DIR) / f"{safe_name}.json"


def file_sha256(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def load_stats(name: str = STATS_NAME, stats_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load stats JSON, or initialize a skeleton if missing.
    """
    path = _stats_path(name, stats_dir)
    if not path.is_file():
        return {
            "name": name,
            "build_stats": {},     # filled by the dataset builder
            "enrich_stats": {},    # filled by the explanation enricher
        }
    return json.loads(path.read_text(encoding="utf-8"))


def save_stats(stats: Dict[str, Any], name: str = STATS_NAME, stats_dir: Optional[Path] = None) -> Path:
    path = _stats_path(name, stats_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(stats, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def update_stage_stats(
    stage: str,
    stage_stats: Dict[str, Any],
    name: str = STATS_NAME,
    stats_dir: Optional[Path] = None,
) -> Path:
    """
    Set / overwrite the '<stage>_stats' block ("build" or "enrich") together
    with the package version and a timestamp.
    """
    stats = load_stats(name, stats_dir)
    stats[f"{stage}_stats"] = {**stage_stats, **get_run_info()}
    return save_stats(stats, name, stats_dir)
