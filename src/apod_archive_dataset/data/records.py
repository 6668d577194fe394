from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from apod_archive_dataset.utils.errors import MalformedDateError, MissingFileError


MEDIA_IMAGE = "image"
MEDIA_VIDEO = "video"
MEDIA_UNKNOWN = "unknown"

# whole-string patterns, always applied with fullmatch
IDENTIFIER_RE = re.compile(r"ap(\d{6})\.html")
DIGITS_RE = re.compile(r"\d{6}")
ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# yy >= 95 -> 19yy, otherwise 20yy (so 94 becomes 2094, not 1994)
CENTURY_PIVOT = 95


@dataclass(frozen=True)
class ArchiveLinkEntry:
    identifier: str   # e.g. "ap251024.html"
    label: str


@dataclass
class Record:
    date: str
    title: str
    explanation: str
    media_type: str
    url: str
    hdurl: str
    copyright: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------- date <-> identifier ----------

def date_from_identifier(identifier: str) -> str:
    """
    ap251024.html (or bare 251024) -> 2025-10-24.
    """
    m = IDENTIFIER_RE.fullmatch(identifier)
    digits = m.group(1) if m else identifier
    if not DIGITS_RE.fullmatch(digits):
        raise ValueError(f"Not an archive page identifier: {identifier!r}")

    yy, mm, dd = digits[0:2], digits[2:4], digits[4:6]
    year = ("19" if int(yy) >= CENTURY_PIVOT else "20") + yy
    return f"{year}-{mm}-{dd}"


def identifier_from_date(date: Any) -> str:
    """
    2025-10-24 -> 251024. Raises MalformedDateError for anything that is
    not strictly YYYY-MM-DD.
    """
    if not isinstance(date, str) or not ISO_DATE_RE.fullmatch(date):
        raise MalformedDateError(f"Malformed date: {date!r}")
    return date[2:4] + date[5:7] + date[8:10]


def page_name_for_date(date: Any) -> str:
    return f"ap{identifier_from_date(date)}.html"


# ---------- ordering ----------

def sort_records_desc(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # fixed-width ISO strings sort chronologically; duplicates keep input order
    return sorted(records, key=lambda r: r.get("date", ""), reverse=True)


# ---------- dataset I/O ----------

def dump_dataset(items: Sequence[Dict[str, Any]]) -> str:
    return json.dumps(list(items), indent=2, ensure_ascii=False)


def load_dataset(path: Path) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Return (raw_text, items). raw_text is kept verbatim for backups,
    line endings included.
    """
    if not path.is_file():
        raise MissingFileError(f"Cannot find {path}")

    with path.open("r", encoding="utf-8", newline="") as f:
        raw = f.read()
    items = json.loads(raw)
    if not isinstance(items, list):
        raise ValueError(f"{path.name} must contain a JSON array")
    return raw, items


def write_text_atomic(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    tmp_path.replace(path)
    return path


def write_dataset(path: Path, items: Sequence[Dict[str, Any]]) -> Path:
    return write_text_atomic(path, dump_dataset(items))
