"""Cell-level helpers: grade-letter recognition and text tests used by the grid parsers."""

from __future__ import annotations

import datetime as dt
import re
from typing import Dict, Optional

import numpy as np
import pandas as pd

GRADE_MARKERS: Dict[str, tuple] = {
    "A": ("أ", "ا", "إ", "آ", "A", "a"),
    "B": ("ب", "B", "b"),
    "C": ("ج", "C", "c"),
    "D": ("د", "D", "d"),
}

# Leading letters accepted for short decorated tokens such as "أ." or "c+".
# Bare alef is left out so the article "ال" is not read as a grade.
PREFIX_MARKERS: Dict[str, tuple] = {
    "A": ("أ", "إ", "آ", "A"),
    "B": ("ب", "B"),
    "C": ("ج", "C"),
    "D": ("د", "D"),
}

GRADE_POINTS = {"A": 3, "B": 2, "C": 1, "D": 0}

SUMMARY_WORDS = ("مجموع", "المجموع", "نسبة", "معدل", "total", "moyenne", "pourcentage")

ARABIC_HEADER_WORDS = ("اللقب", "الاسم", "الإسم", "الأسم")
LATIN_HEADER_WORDS = {"nom", "prénom", "prenom", "name", "noms"}

NUMERIC_LIKE_RX = re.compile(r"^[\d/\-\.]+$")
QUOTES_RX = re.compile(r"[\"'“”«»]")


def cell_text(value) -> str:
    """Return the trimmed text of a raw cell ('' for empty / NaN cells)."""

    if value is None:
        return ""
    if isinstance(value, float) and np.isnan(value):
        return ""
    if value is pd.NaT:
        return ""
    return str(value).replace("\u00A0", " ").strip()


def is_empty(value) -> bool:
    return cell_text(value) == ""


def recognize_grade(value, max_length: int = 3) -> Optional[str]:
    """Return 'A'..'D' for a grade-letter cell, None for anything else.

    Never raises: numbers, dates and arbitrary objects simply resolve to None.
    """

    token = cell_text(value)
    if not token or len(token) > max_length:
        return None

    for grade, markers in GRADE_MARKERS.items():
        if token in markers:
            return grade

    if len(token) <= 2:
        head = token[0]
        for grade, markers in PREFIX_MARKERS.items():
            if head in markers or head.upper() in markers:
                return grade
    return None


def is_numeric_like(value) -> bool:
    """True for numbers, dates and strings made only of digits / slashes / dashes / dots."""

    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, np.integer, np.floating)):
        return True
    if isinstance(value, (dt.date, dt.datetime, pd.Timestamp)):
        return True
    return bool(NUMERIC_LIKE_RX.match(cell_text(value)))


def is_summary_text(value) -> bool:
    text = cell_text(value).lower()
    if not text:
        return False
    return any(word in text for word in SUMMARY_WORDS)


def is_header_text(value) -> bool:
    """True when *value* carries name-column header vocabulary (اللقب, الاسم, Nom)."""

    text = cell_text(value)
    if not text:
        return False
    if any(word in text for word in ARABIC_HEADER_WORDS):
        return True
    for token in re.split(r"[\s/,\-]+", text.lower()):
        if token.strip(".:") in LATIN_HEADER_WORDS:
            return True
    return False


def clean_name(value) -> str:
    text = QUOTES_RX.sub("", cell_text(value))
    return re.sub(r"\s+", " ", text).strip()
