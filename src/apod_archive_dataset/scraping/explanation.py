# src/apod_archive_dataset/scraping/explanation.py
from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup

EXPLANATION_RE = re.compile(r"explanation", re.IGNORECASE)
LABELLED_RE = re.compile(r"explanation:", re.IGNORECASE)
LEADING_LABEL_RE = re.compile(r"^\s*Explanation:\s*", re.IGNORECASE)


def _clean(text: str) -> str:
    text = LEADING_LABEL_RE.sub("", text)
    return " ".join(text.split())


def _from_bold_label(soup: BeautifulSoup) -> str:
    # the usual layout is <p><b> Explanation: </b> text ... </p>
    for b in soup.find_all("b"):
        if not EXPLANATION_RE.search(b.get_text().strip()):
            continue
        paragraph = b.find_parent("p")
        if paragraph is not None:
            return paragraph.get_text()
        if b.parent is not None:
            return b.parent.get_text()
        return ""
    return ""


def _from_labelled_paragraph(soup: BeautifulSoup) -> str:
    for p in soup.find_all("p"):
        text = p.get_text()
        if LABELLED_RE.search(text):
            return text
    return ""


def extract_explanation(html: str) -> Optional[str]:
    """
    Layered lookup, first hit wins:

    1. first <b> mentioning "explanation" -> its enclosing <p>, else its parent
    2. first <p> containing "explanation:"

    The leading "Explanation:" label is stripped and whitespace collapsed.
    Returns None when nothing usable is left.
    """
    soup = BeautifulSoup(html, "lxml")

    text = _from_bold_label(soup)
    if not text.strip():
        text = _from_labelled_paragraph(soup)

    text = _clean(text)
    return text or None
