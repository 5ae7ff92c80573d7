"""Decide whether a raw spreadsheet row is a student line and split it into name + grades."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from grade_tokens import (
    cell_text,
    clean_name,
    is_empty,
    is_header_text,
    is_numeric_like,
    is_summary_text,
    recognize_grade,
)

logger = logging.getLogger(__name__)

NAME_SCAN_CELLS = 6
MIN_NAME_LENGTH = 3


@dataclass
class ClassifiedRow:
    name: str
    grades: List[str]
    name_index: int
    merged: bool = False


def _is_name_part(value) -> bool:
    text = cell_text(value)
    if len(text) < MIN_NAME_LENGTH:
        return False
    if is_numeric_like(value) or recognize_grade(value) is not None:
        return False
    return not is_summary_text(value)


def classify_row(row: Sequence) -> Optional[ClassifiedRow]:
    """Return the name and ordered grades of a student row, or None for anything else.

    Leading roll-number / date columns are skipped. A summary cell met while
    looking for the name rejects the row. When the surname and first name sit
    in two adjacent cells they are joined with a space.
    """

    cells = list(row)
    if sum(1 for cell in cells if not is_empty(cell)) < 2:
        return None

    name = ""
    name_index = -1
    merged = False
    for idx, cell in enumerate(cells[:NAME_SCAN_CELLS]):
        text = cell_text(cell)
        if not text or is_numeric_like(cell):
            continue
        if is_summary_text(cell):
            return None
        if len(text) < MIN_NAME_LENGTH or recognize_grade(cell) is not None:
            continue
        name = text
        name_index = idx
        if idx + 1 < len(cells) and _is_name_part(cells[idx + 1]):
            name = f"{text} {cell_text(cells[idx + 1])}"
            merged = True
        break

    if name_index < 0:
        return None

    name = clean_name(name)
    if not name or is_header_text(name) or is_summary_text(name):
        logger.debug("Rejected header/summary row: %s", name)
        return None

    start = name_index + (2 if merged else 1)
    grades = [grade for grade in (recognize_grade(cell) for cell in cells[start:]) if grade]
    return ClassifiedRow(name=name, grades=grades, name_index=name_index, merged=merged)
