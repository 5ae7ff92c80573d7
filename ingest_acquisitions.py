#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import argparse
import json
import logging
import os
from typing import Dict, List

import pandas as pd

from acq_schemas import lookup_schema, supported_pairs
from acq_types import AcqClassRecord
from detailed_grid import parse_detailed_grid
from indicators import (
    criterion_success_rates,
    efficiency_index,
    grade_distribution,
    homogeneity_index,
    quadrant_distribution,
    remediation_plan,
    structured_indicators,
    student_scores,
)
from mastery_summary import build_group_ranking, build_mastery_summary

HERE = os.path.dirname(os.path.abspath(__file__))
LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"

logger = logging.getLogger(__name__)


def load_config(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def resolve_config(path: str) -> Dict:
    cfg_path = path if os.path.isfile(path) else os.path.join(os.getcwd(), "config.json")
    if not os.path.isfile(cfg_path):
        logger.info("No config file found, using defaults")
        return {}
    return load_config(cfg_path)


def class_name_from_path(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def indicator_row(record: AcqClassRecord, entry) -> Dict:
    """Return the one-line indicator block for *record* (or the pooled cohort)."""

    scores = student_scores(record.students, entry)
    row = {
        "school_name": record.school_name,
        "class_name": record.class_name,
        "students": len(record.students),
        "homogeneity": round(homogeneity_index(scores.loc[scores["graded"] > 0, "composite"]), 2),
    }
    eff = efficiency_index(record.students, entry.definition)
    row["efficiency_index"] = eff["index"]
    row["efficiency_zone"] = eff["zone"]
    row.update(structured_indicators(record.students))
    return row


def main():
    ap = argparse.ArgumentParser(description="Parse subject acquisitions grids and compute class indicators.")
    ap.add_argument("--input", required=True, nargs="+", help="One .xlsx/.csv grid per class")
    ap.add_argument("--level", required=True, help="Level code, e.g. 2AP, 4AP, 5AP")
    ap.add_argument("--subject", required=True, help="Subject name, e.g. اللغة العربية")
    ap.add_argument("--school", default="", help="School name stored on every record")
    ap.add_argument("--class-name", default=None, help="Class name (single input only; defaults to the file name)")
    ap.add_argument("--academic-year", default=None)
    ap.add_argument("--outdir", default="outputs")
    ap.add_argument("--config", default=os.path.join(HERE, "config.json"))
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    entry = lookup_schema(args.level, args.subject)
    if entry is None:
        pairs = ", ".join(f"{lvl}/{subj}" for lvl, subj in supported_pairs())
        raise SystemExit(f"Unsupported level/subject {args.level}/{args.subject}. Supported: {pairs}")

    cfg = resolve_config(args.config)
    academic_year = args.academic_year or cfg.get("academic_year", "")
    top_n = int(cfg.get("remediation_top_n", 3))

    records: List[AcqClassRecord] = []
    dq_issues = []

    for path in args.input:
        if not os.path.isfile(path):
            raise SystemExit(f"Input file not found: {path}")
        with open(path, "rb") as f:
            data = f.read()

        try:
            students = parse_detailed_grid(data, args.level, args.subject)
        except ValueError as exc:
            dq_issues.append({"sheet": path, "issue": str(exc)})
            continue

        if not students:
            dq_issues.append({"sheet": path, "issue": "No student rows detected"})
            continue

        class_name = args.class_name if args.class_name and len(args.input) == 1 else class_name_from_path(path)
        records.append(
            AcqClassRecord(
                school_name=args.school,
                class_name=class_name,
                level=args.level,
                subject=args.subject,
                academic_year=academic_year,
                students=students,
            )
        )
        logger.info("%s: %d students", path, len(students))

    if not records:
        raise SystemExit("No usable data found.")

    all_students = [s for rec in records for s in rec.students]
    cohort = AcqClassRecord(
        school_name=args.school,
        class_name="ALL",
        level=args.level,
        subject=args.subject,
        academic_year=academic_year,
        students=all_students,
    )

    score_frames = []
    for rec in records:
        frame = student_scores(rec.students, entry)
        frame.insert(0, "class_name", rec.class_name)
        score_frames.append(frame)
    scores = pd.concat(score_frames, ignore_index=True)

    success_rates = criterion_success_rates(all_students, entry.definition)
    mastery = build_mastery_summary(scores)
    class_ranking = build_group_ranking(scores, by="class_name")
    quadrants = quadrant_distribution(scores, entry)
    distribution = grade_distribution(all_students, entry.definition)
    plan = remediation_plan(all_students, entry.definition, top_n=top_n)
    indicators = pd.DataFrame([indicator_row(rec, entry) for rec in records + [cohort]])

    outdir = args.outdir
    os.makedirs(outdir, exist_ok=True)

    with open(os.path.join(outdir, "acq_records.json"), "w", encoding="utf-8") as f:
        json.dump([rec.to_dict() for rec in records], f, ensure_ascii=False, indent=2)

    with pd.ExcelWriter(os.path.join(outdir, "acquisitions_analysis.xlsx"), engine="openpyxl") as w:
        scores.to_excel(w, index=False, sheet_name="student_scores")
        success_rates.to_excel(w, index=False, sheet_name="criterion_success")
        mastery.to_excel(w, index=False, sheet_name="mastery_summary")
        class_ranking.to_excel(w, index=False, sheet_name="class_ranking")
        quadrants.to_excel(w, index=False, sheet_name="quadrants")
        distribution.to_excel(w, index=False, sheet_name="grade_distribution")
        plan.to_excel(w, index=False, sheet_name="remediation_plan")
        indicators.to_excel(w, index=False, sheet_name="indicators")

    scores.to_csv(os.path.join(outdir, "acq_student_scores.csv"), index=False)
    success_rates.to_csv(os.path.join(outdir, "acq_criterion_success.csv"), index=False)
    mastery.to_csv(os.path.join(outdir, "acq_mastery_summary.csv"), index=False)
    class_ranking.to_csv(os.path.join(outdir, "acq_class_ranking.csv"), index=False)
    quadrants.to_csv(os.path.join(outdir, "acq_quadrants.csv"), index=False)
    distribution.to_csv(os.path.join(outdir, "acq_grade_distribution.csv"), index=False)
    plan.to_csv(os.path.join(outdir, "acq_remediation_plan.csv"), index=False)
    indicators.to_csv(os.path.join(outdir, "acq_indicators.csv"), index=False)

    # Data-quality report
    dq_df = pd.DataFrame(dq_issues, columns=["sheet", "issue"])
    dq_df.to_csv(os.path.join(outdir, "data_quality_report.csv"), index=False)

    print("Wrote outputs to:", outdir)


if __name__ == "__main__":
    main()
