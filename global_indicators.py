"""Indicators over omnibus-grid students: elite / relative rates and per-subject distribution."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

import numpy as np
import pandas as pd

from acq_types import AcqGlobalRecord, AcqGlobalStudent
from global_grid import normalize_arabic

AMAZIGH_KEYWORDS = ("الامازيغيه", "امازيغيه")

# Display priority by label fragment; anything else keeps discovery order after these.
SUBJECT_PRIORITY = (("عربي", 1), ("امازيغ", 2), ("رياضيات", 3), ("فرنس", 4))
DEFAULT_PRIORITY = 10


def is_optional_subject(label: str) -> bool:
    norm = normalize_arabic(label)
    return any(key in norm for key in AMAZIGH_KEYWORDS)


def applicable_subjects(student: AcqGlobalStudent, include_optional: bool = True) -> Dict[str, str]:
    """Return the student's grades, without the Amazigh subject when the school does not teach it."""

    if include_optional:
        return dict(student.subjects)
    return {label: grade for label, grade in student.subjects.items() if not is_optional_subject(label)}


def _tally(pairs: Iterable[tuple]) -> Dict[str, float]:
    evaluated = elite = relative = volume = 0
    for student, include_optional in pairs:
        grades = [g for g in applicable_subjects(student, include_optional).values() if g]
        if not grades:
            continue
        evaluated += 1
        volume += len(grades)
        elite += all(g == "A" for g in grades)
        relative += all(g in ("A", "B") for g in grades)

    def rate(count: int) -> float:
        return round(count / evaluated * 100, 2) if evaluated else 0.0

    return {
        "evaluated": evaluated,
        "elite_count": elite,
        "elite_rate": rate(elite),
        "relative_count": relative,
        "relative_rate": rate(relative),
        "subject_volume": volume,
        "avg_subjects": round(volume / evaluated, 2) if evaluated else 0.0,
    }


def global_rates(students: Iterable[AcqGlobalStudent], include_optional: bool = True) -> Dict[str, float]:
    """Elite (all A) and relative (all A or B) rates over students with any applicable grade."""

    return _tally((s, include_optional) for s in students)


def global_rates_for_records(records: Iterable[AcqGlobalRecord]) -> Dict[str, float]:
    return _tally((s, rec.include_amazigh) for rec in records for s in rec.students)


def order_subjects(labels: Sequence[str]) -> List[str]:
    def priority(label: str) -> int:
        norm = normalize_arabic(label)
        for fragment, rank in SUBJECT_PRIORITY:
            if fragment in norm:
                return rank
        return DEFAULT_PRIORITY

    return sorted(labels, key=priority)


def sort_by_number(students: Iterable[AcqGlobalStudent]) -> List[AcqGlobalStudent]:
    return sorted(students, key=lambda s: s.number)


def subject_distribution(students: Sequence[AcqGlobalStudent], subjects: Sequence[str] = ()) -> pd.DataFrame:
    """Return A-D counts and success rate per subject, in display order."""

    columns = ["subject", "A", "B", "C", "D", "graded", "success_rate"]
    if not subjects:
        seen: Dict[str, None] = {}
        for student in students:
            for label in student.subjects:
                seen.setdefault(label, None)
        subjects = list(seen)

    rows = []
    for label in order_subjects(subjects):
        grades = pd.Series([s.subjects.get(label) for s in students], dtype=object)
        counts = grades.value_counts()
        row = {g: int(counts.get(g, 0)) for g in ("A", "B", "C", "D")}
        row["subject"] = label
        row["graded"] = sum(row[g] for g in ("A", "B", "C", "D"))
        rows.append(row)

    df = pd.DataFrame(rows, columns=columns)
    if df.empty:
        return df
    df["success_rate"] = np.where(
        df["graded"] > 0,
        ((df["A"] + df["B"]) / df["graded"].where(df["graded"] > 0, 1) * 100).round(2),
        0.0,
    )
    return df
