"""Indicators computed over detailed-grid students: scores, quadrants, success rates, remediation."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from acq_schemas import SchemaEntry
from acq_types import AcqStudent, SubjectDefinition
from grade_tokens import GRADE_POINTS
from remediation_kb import lookup_remediation

GRADES = ("A", "B", "C", "D")

CONTROLLED_MIN = 66
PARTIAL_MIN = 33
AXIS_THRESHOLD = 50

EFFICIENCY_ZONES = (
    (75, 1, "مؤشر نجاعة مرتفع", "مؤشر على جودة الممارسات، مع وجود عوائق مرتبطة بتكافؤ الفرص."),
    (50, 2, "مؤشر نجاعة متوسط", "مؤشر على وجود معيقات تعلم مرتبطة بتعليمية المواد أو الممارسات."),
    (0, 3, "مؤشر نجاعة منخفض", "مؤشر على وجوب إعادة النظر في أقطاب العملية التعليمية (المعلم، المتعلم، المحتوى)."),
)


def _pct(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def composite_percentage(grades: Iterable[Optional[str]]) -> float:
    """Return points / (3 x graded criteria) x 100, with A=3 B=2 C=1 D=0; 0 when nothing is graded."""

    graded = [g for g in grades if g in GRADE_POINTS]
    if not graded:
        return 0.0
    return sum(GRADE_POINTS[g] for g in graded) / (3 * len(graded)) * 100


def classify_mastery(percent: float) -> str:
    if percent >= CONTROLLED_MIN:
        return "controlled"
    if percent >= PARTIAL_MIN:
        return "partial"
    return "limited"


def homogeneity_index(percentages: Iterable[float]) -> float:
    """Population standard deviation of the cohort's composite percentages."""

    values = np.asarray(list(percentages), dtype=float)
    if values.size == 0 or np.ptp(values) == 0:
        return 0.0
    return float(np.std(values))


def _competency_grades(student: AcqStudent, competency_ids: Sequence[str]) -> List[Optional[str]]:
    out: List[Optional[str]] = []
    for comp_id in competency_ids:
        out.extend((student.results.get(comp_id) or {}).values())
    return out


def _slot_grades(student: AcqStudent, definition: SubjectDefinition) -> List[Optional[str]]:
    return [
        (student.results.get(comp.id) or {}).get(crit.id)
        for comp in definition.competencies
        for crit in comp.criteria
    ]


def quadrant_for(first_axis: float, second_axis: float, names: Sequence[str]) -> str:
    first_high = first_axis >= AXIS_THRESHOLD
    second_high = second_axis >= AXIS_THRESHOLD
    if first_high and second_high:
        return names[0]
    if first_high:
        return names[1]
    if second_high:
        return names[2]
    return names[3]


def student_scores(students: Iterable[AcqStudent], entry: SchemaEntry) -> pd.DataFrame:
    """Return one row per student with composite, mastery band, axis scores and quadrant.

    Students with no graded criterion get composite 0 and no quadrant.
    """

    first_label, second_label = entry.axis_labels
    columns = [
        "student_id",
        "full_name",
        "graded",
        "composite",
        "mastery",
        f"axis_{first_label}",
        f"axis_{second_label}",
        "quadrant",
    ]
    rows = []
    for student in students:
        grades = _slot_grades(student, entry.definition)
        graded = sum(1 for g in grades if g)
        first = composite_percentage(_competency_grades(student, entry.axes[0]))
        second = composite_percentage(_competency_grades(student, entry.axes[1]))
        composite = composite_percentage(grades)
        rows.append({
            "student_id": student.id,
            "full_name": student.full_name,
            "graded": graded,
            "composite": composite,
            "mastery": classify_mastery(composite),
            f"axis_{first_label}": first,
            f"axis_{second_label}": second,
            "quadrant": quadrant_for(first, second, entry.quadrant_names) if graded else None,
        })
    scores = pd.DataFrame(rows, columns=columns)
    scores["quadrant"] = scores["quadrant"].astype(object)
    return scores


def quadrant_distribution(scores: pd.DataFrame, entry: SchemaEntry) -> pd.DataFrame:
    """Count students per quadrant; only students with at least one graded criterion are placed."""

    placed = scores[scores["graded"] > 0]
    total = len(placed)
    counts = placed["quadrant"].value_counts()
    rows = []
    for name in entry.quadrant_names:
        count = int(counts.get(name, 0))
        rows.append({"quadrant": name, "count": count, "pct": _pct(count, total)})
    return pd.DataFrame(rows, columns=["quadrant", "count", "pct"])


def criterion_success_rates(students: Sequence[AcqStudent], definition: SubjectDefinition) -> pd.DataFrame:
    """Per-criterion A-D counts and success rate ((A+B) / graded), weakest first.

    Ties keep schema order; ungraded criteria have rate 0.
    """

    rows = []
    for comp in definition.competencies:
        for crit in comp.criteria:
            counts = {g: 0 for g in GRADES}
            for student in students:
                grade = (student.results.get(comp.id) or {}).get(crit.id)
                if grade in counts:
                    counts[grade] += 1
            graded = sum(counts.values())
            rows.append({
                "competency_id": comp.id,
                "competency": comp.label,
                "criterion_id": crit.id,
                "criterion": crit.label,
                **counts,
                "graded": graded,
                "success_rate": _pct(counts["A"] + counts["B"], graded),
            })

    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.sort_values("success_rate", ascending=True, kind="mergesort").reset_index(drop=True)


def grade_distribution(students: Sequence[AcqStudent], definition: SubjectDefinition) -> pd.DataFrame:
    counts = {g: 0 for g in GRADES}
    for student in students:
        for grade in _slot_grades(student, definition):
            if grade in counts:
                counts[grade] += 1
    total = sum(counts.values())
    return pd.DataFrame(
        [{"grade": g, "count": counts[g], "pct": _pct(counts[g], total)} for g in GRADES],
        columns=["grade", "count", "pct"],
    )


def structured_indicators(students: Iterable[AcqStudent]) -> Dict[str, float]:
    """Satisfaction / efficiency / remediation indicators over every recorded grade."""

    counts = {g: 0 for g in GRADES}
    for student in students:
        for grade in student.grades():
            if grade in counts:
                counts[grade] += 1
    total = sum(counts.values())
    valid = max(total, 1)

    specific = round(counts["A"] / valid * 100, 2)
    efficiency = round((counts["A"] + counts["B"]) / valid * 100, 2)
    return {
        "total_grades": total,
        "general_satisfaction": counts["A"],
        "specific_satisfaction": specific,
        "efficiency": efficiency,
        "remediation_load": counts["C"] + counts["D"],
        "remediation_rate": round((counts["C"] + counts["D"]) / valid * 100, 2),
        "pedagogical_gap": round(efficiency - specific, 2),
        "mastery_rate": specific,
        "partial_rate": round(counts["B"] / valid * 100, 2),
        "failure_rate": round(counts["D"] / valid * 100, 2),
    }


def efficiency_index(students: Sequence[AcqStudent], definition: SubjectDefinition) -> Dict[str, object]:
    """Return the relative efficiency index ((A+B) / graded over all criteria) and its zone."""

    graded = 0
    success = 0
    for student in students:
        for grade in _slot_grades(student, definition):
            if grade:
                graded += 1
                success += grade in ("A", "B")
    index = _pct(success, graded)

    zone = next(z for z in EFFICIENCY_ZONES if index >= z[0])
    return {"index": index, "zone": zone[1], "zone_label": zone[2], "zone_description": zone[3]}


def remediation_plan(
    students: Sequence[AcqStudent],
    definition: SubjectDefinition,
    top_n: int = 3,
) -> pd.DataFrame:
    """Rank criteria by share of the cohort graded D and attach remediation texts to the top *top_n*."""

    columns = [
        "rank",
        "competency",
        "criterion",
        "d_count",
        "fail_rate",
        "origin",
        "cause",
        "activity",
    ]
    cohort = len(students)
    if cohort == 0:
        return pd.DataFrame(columns=columns)

    failures = []
    for comp in definition.competencies:
        for crit in comp.criteria:
            d_count = sum(
                1 for s in students if (s.results.get(comp.id) or {}).get(crit.id) == "D"
            )
            if d_count:
                failures.append((comp, crit, d_count, d_count / cohort * 100))

    failures.sort(key=lambda item: item[3], reverse=True)
    rows = []
    for rank, (comp, crit, d_count, rate) in enumerate(failures[:top_n], start=1):
        rows.append({
            "rank": rank,
            "competency": comp.label,
            "criterion": crit.label,
            "d_count": d_count,
            "fail_rate": round(rate, 2),
            **lookup_remediation(crit.label),
        })
    return pd.DataFrame(rows, columns=columns)
