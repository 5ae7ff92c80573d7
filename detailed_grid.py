"""Parse a subject-specific acquisitions grid into AcqStudent records."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from acq_schemas import lookup_schema
from acq_types import AcqStudent, Results, SubjectDefinition
from row_classifier import classify_row
from sheet_reader import read_first_sheet

logger = logging.getLogger(__name__)


def map_grades_to_results(grades: Sequence[str], definition: SubjectDefinition) -> Results:
    """Spread the flat *grades* sequence over the definition's criteria, in schema order.

    Slots past the end of *grades* stay None.
    """

    results: Results = {}
    pos = 0
    for comp in definition.competencies:
        slots = {}
        for crit in comp.criteria:
            slots[crit.id] = grades[pos] if pos < len(grades) else None
            pos += 1
        results[comp.id] = slots
    return results


def parse_detailed_rows(rows: Iterable[Sequence], level: str, subject: str) -> List[AcqStudent]:
    entry = lookup_schema(level, subject)
    if entry is None:
        logger.info("No acquisitions schema for level=%r subject=%r", level, subject)
        return []

    students: List[AcqStudent] = []
    dropped = 0
    for row in rows:
        classified = classify_row(row)
        if classified is None:
            continue
        if len(classified.grades) < entry.min_grades:
            dropped += 1
            logger.debug(
                "Dropped %s: %d grades < %d", classified.name, len(classified.grades), entry.min_grades
            )
            continue
        students.append(
            AcqStudent(
                full_name=classified.name,
                results=map_grades_to_results(classified.grades, entry.definition),
            )
        )

    logger.info(
        "Parsed %d students for %s (%d rows under the %d-grade threshold)",
        len(students),
        entry.definition.id,
        dropped,
        entry.min_grades,
    )
    return students


def parse_detailed_grid(data: bytes, level: str, subject: str) -> List[AcqStudent]:
    return parse_detailed_rows(read_first_sheet(data), level, subject)
