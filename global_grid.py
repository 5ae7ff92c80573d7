"""Parse an omnibus grid (one row per student, one column per subject)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from acq_types import AcqGlobalStudent
from grade_tokens import cell_text, is_summary_text, recognize_grade
from sheet_reader import read_first_sheet

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 10
MIN_SUBJECTS = 3

HARAKAT_RX = re.compile(r"[\u064B-\u0652\u0670]")
NON_SUBJECT_WORDS = ("ميلاد", "ازدياد")

# Ordered (root, label) pairs. The first root found in a header cell wins, so
# the science dimensions must stay ahead of the generic science root.
SUBJECT_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("بيولوج", "التربية العلمية (البعد البيولوجي)"),
    ("تكنولوج", "التربية العلمية (البعد التكنولوجي)"),
    ("علمي", "التربية العلمية"),
    ("عربي", "اللغة العربية"),
    ("امازيغ", "اللغة الأمازيغية"),
    ("فرنس", "اللغة الفرنسية"),
    ("انجليز", "اللغة الإنجليزية"),
    ("انكليز", "اللغة الإنجليزية"),
    ("رياضيات", "الرياضيات"),
    ("اسلامي", "التربية الإسلامية"),
    ("مدني", "التربية المدنية"),
    ("تاريخ", "التاريخ"),
    ("جغرافي", "الجغرافيا"),
    ("بدني", "التربية البدنية"),
    ("تشكيلي", "التربية الفنية"),
    ("فني", "التربية الفنية"),
    ("موسيق", "التربية الموسيقية"),
    ("arabe", "اللغة العربية"),
    ("tamazight", "اللغة الأمازيغية"),
    ("amazigh", "اللغة الأمازيغية"),
    ("fran", "اللغة الفرنسية"),
    ("anglais", "اللغة الإنجليزية"),
    ("math", "الرياضيات"),
)


class HeaderNotFoundError(ValueError):
    """No row of the scanned window names enough subjects to act as the header."""


@dataclass
class GlobalGridResult:
    students: List[AcqGlobalStudent] = field(default_factory=list)
    detected_subjects: List[str] = field(default_factory=list)


def normalize_arabic(text) -> str:
    """Fold Arabic spelling variants so header matching ignores hamza, ta marbuta and harakat."""

    s = cell_text(text)
    s = re.sub("[أإآ]", "ا", s)
    s = re.sub("[ىئ]", "ي", s)
    s = s.replace("ة", "ه").replace("\u0640", "")
    s = HARAKAT_RX.sub("", s)
    s = re.sub(r"\s+", " ", s)
    return s.strip().lower()


def match_subject(text) -> Optional[str]:
    norm = normalize_arabic(text)
    if not norm:
        return None
    if any(word in norm for word in NON_SUBJECT_WORDS):
        return None
    for root, label in SUBJECT_KEYWORDS:
        if root in norm:
            return label
    return None


def detect_header(
    rows: Sequence[Sequence],
    scan_limit: int = HEADER_SCAN_ROWS,
    min_subjects: int = MIN_SUBJECTS,
) -> Tuple[int, Dict[str, int]]:
    """Return (header row index, {subject label: column}) for the first qualifying row."""

    best = 0
    for row_idx, row in enumerate(rows[:scan_limit]):
        columns: Dict[str, int] = {}
        for col_idx, cell in enumerate(row):
            label = match_subject(cell)
            if label and label not in columns:
                columns[label] = col_idx
        if len(columns) >= min_subjects:
            logger.debug("Header row %d maps %s", row_idx, columns)
            return row_idx, columns
        best = max(best, len(columns))

    raise HeaderNotFoundError(
        f"No header row with at least {min_subjects} subjects in the first "
        f"{min(scan_limit, len(rows))} rows (best match: {best} subjects)"
    )


def parse_roll_number(value) -> int:
    try:
        return int(float(cell_text(value)))
    except (TypeError, ValueError, OverflowError):
        return 0


def parse_global_rows(
    rows: Iterable[Sequence],
    scan_limit: int = HEADER_SCAN_ROWS,
    min_subjects: int = MIN_SUBJECTS,
) -> GlobalGridResult:
    rows = list(rows)
    header_idx, columns = detect_header(rows, scan_limit, min_subjects)

    students: List[AcqGlobalStudent] = []
    for row in rows[header_idx + 1:]:
        first = row[0] if len(row) > 0 else None
        second = row[1] if len(row) > 1 else None
        if is_summary_text(first) or is_summary_text(second):
            continue

        subjects: Dict[str, str] = {}
        for label, col in columns.items():
            grade = recognize_grade(row[col]) if col < len(row) else None
            if grade:
                subjects[label] = grade
        if len(subjects) < min_subjects:
            continue

        students.append(AcqGlobalStudent(number=parse_roll_number(first), subjects=subjects))

    logger.info("Parsed %d students over %d subjects", len(students), len(columns))
    return GlobalGridResult(students=students, detected_subjects=list(columns))


def parse_global_grid(data: bytes, **kwargs) -> GlobalGridResult:
    return parse_global_rows(read_first_sheet(data), **kwargs)
