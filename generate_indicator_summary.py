#!/usr/bin/env python3
"""Generate the mastery-band summary from saved acquisitions class records."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List

import pandas as pd

from acq_schemas import lookup_schema
from acq_types import AcqClassRecord
from indicators import student_scores
from mastery_summary import build_group_ranking, build_mastery_summary

DEFAULT_RECORDS_PATH = Path("outputs/acq_records.json")
DEFAULT_OUTPUT_PATH = Path("outputs/acq_mastery_summary.csv")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--records",
        type=Path,
        default=DEFAULT_RECORDS_PATH,
        help="Path to acq_records.json (default: outputs/acq_records.json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help=(
            "Destination path for the summary table (default: "
            "outputs/acq_mastery_summary.csv). The format is inferred from the file extension."
        ),
    )
    parser.add_argument(
        "--by",
        choices=("class_name", "school_name"),
        default=None,
        help="Rank groups by mean composite instead of writing the mastery-band summary",
    )
    return parser.parse_args()


def load_records(records_path: Path) -> List[AcqClassRecord]:
    if not records_path.exists():
        raise FileNotFoundError(f"Records file not found: {records_path}")

    with records_path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return [AcqClassRecord.from_dict(item) for item in payload]


def build_scores(records: List[AcqClassRecord]) -> pd.DataFrame:
    frames = []
    for record in records:
        entry = lookup_schema(record.level, record.subject)
        if entry is None:
            continue
        frame = student_scores(record.students, entry)
        frame.insert(0, "class_name", record.class_name)
        frame.insert(0, "school_name", record.school_name)
        frames.append(frame)
    if not frames:
        return pd.DataFrame(columns=["school_name", "class_name", "student_id", "graded", "composite", "mastery"])
    return pd.concat(frames, ignore_index=True)


def build_summary(records_path: Path, by: str | None = None) -> pd.DataFrame:
    scores = build_scores(load_records(records_path))
    if by:
        return build_group_ranking(scores, by=by)
    return build_mastery_summary(scores)


def write_output(summary: pd.DataFrame, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    suffix = destination.suffix.lower()
    if suffix in {".xlsx", ".xlsm"}:
        summary.to_excel(destination, index=False, engine="openpyxl")
    else:
        summary.to_csv(destination, index=False)


def main() -> None:
    args = parse_args()
    summary = build_summary(args.records, args.by)
    write_output(summary, args.output)
    print(f"Wrote acquisitions summary to: {args.output}")


if __name__ == "__main__":
    main()
