#!/usr/bin/env python3
"""Generate elite / relative rates and per-subject grade counts from omnibus acquisitions grids."""

from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Dict, List

import pandas as pd

from acq_types import AcqGlobalRecord
from global_grid import HEADER_SCAN_ROWS, MIN_SUBJECTS, HeaderNotFoundError, parse_global_grid
from global_indicators import (
    global_rates,
    global_rates_for_records,
    order_subjects,
    sort_by_number,
    subject_distribution,
)

HERE = os.path.dirname(os.path.abspath(__file__))
LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"

logger = logging.getLogger(__name__)

RATE_METRICS = (
    "evaluated",
    "elite_count",
    "elite_rate",
    "relative_count",
    "relative_rate",
    "subject_volume",
    "avg_subjects",
)


def load_config(path: str) -> Dict:
    if not path or not os.path.isfile(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def include_amazigh_for(school: str, cfg: Dict) -> bool:
    by_school = cfg.get("include_amazigh_by_school") or {}
    if school in by_school:
        return bool(by_school[school])
    return bool(cfg.get("include_amazigh_default", True))


def load_records(paths: List[str], school: str, include_amazigh: bool, cfg: Dict) -> tuple:
    """Parse every omnibus file into an AcqGlobalRecord; return (records, issues)."""

    scan_rows = int(cfg.get("header_scan_rows", HEADER_SCAN_ROWS))
    min_subjects = int(cfg.get("min_global_subjects", MIN_SUBJECTS))

    records: List[AcqGlobalRecord] = []
    issues: List[Dict[str, str]] = []
    for path in paths:
        if not os.path.exists(path):
            raise SystemExit(f"Omnibus grid not found: {path}")
        with open(path, "rb") as f:
            data = f.read()

        try:
            result = parse_global_grid(data, scan_limit=scan_rows, min_subjects=min_subjects)
        except HeaderNotFoundError as exc:
            logger.warning("%s: %s", path, exc)
            issues.append({"sheet": path, "issue": str(exc)})
            continue

        if not result.students:
            issues.append({"sheet": path, "issue": "No student rows detected"})
            continue

        records.append(
            AcqGlobalRecord(
                school_name=school,
                academic_year=cfg.get("academic_year", ""),
                include_amazigh=include_amazigh,
                detected_subjects=order_subjects(result.detected_subjects),
                students=sort_by_number(result.students),
            )
        )
    return records, issues


def build_summary(records: List[AcqGlobalRecord]) -> pd.DataFrame:
    rows: List[Dict[str, object]] = []

    for idx, record in enumerate(records, start=1):
        rates = global_rates(record.students, include_optional=record.include_amazigh)
        for metric in RATE_METRICS:
            rows.append({
                "view": "File rates",
                "file": idx,
                "subject": "All",
                "metric": metric,
                "value": rates[metric],
            })

    pooled = global_rates_for_records(records)
    for metric in RATE_METRICS:
        rows.append({"view": "Pooled rates", "file": "All", "subject": "All", "metric": metric, "value": pooled[metric]})

    labels: List[str] = []
    for record in records:
        labels.extend(label for label in record.detected_subjects if label not in labels)
    distribution = subject_distribution([s for rec in records for s in rec.students], labels)
    for _, dist in distribution.iterrows():
        for metric in ("A", "B", "C", "D", "graded", "success_rate"):
            rows.append({
                "view": "Subject distribution",
                "file": "All",
                "subject": dist["subject"],
                "metric": metric,
                "value": dist[metric],
            })

    return pd.DataFrame(rows, columns=["view", "file", "subject", "metric", "value"])


def write_output(summary: pd.DataFrame, destination: str) -> None:
    parent = os.path.dirname(destination)
    if parent:
        os.makedirs(parent, exist_ok=True)
    if destination.lower().endswith((".xlsx", ".xlsm")):
        summary.to_excel(destination, index=False, engine="openpyxl")
    else:
        summary.to_csv(destination, index=False)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", required=True, nargs="+", help="Omnibus grid files (.xlsx or .csv)")
    parser.add_argument("--school", default="", help="School name stored on the records")
    parser.add_argument(
        "--no-amazigh",
        action="store_true",
        help="The school does not teach Amazigh; leave it out of the elite/relative rates",
    )
    parser.add_argument("--output", default="outputs/global_summary.csv")
    parser.add_argument("--records-out", default=None, help="Optional JSON dump of the parsed records")
    parser.add_argument("--config", default=os.path.join(HERE, "config.json"))
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    cfg = load_config(args.config)
    include_amazigh = False if args.no_amazigh else include_amazigh_for(args.school, cfg)

    records, issues = load_records(args.input, args.school, include_amazigh, cfg)
    for issue in issues:
        print(f"[WARN] {issue['sheet']}: {issue['issue']}")
    if not records:
        raise SystemExit("No usable data found.")

    summary = build_summary(records)
    write_output(summary, args.output)

    if args.records_out:
        with open(args.records_out, "w", encoding="utf-8") as f:
            json.dump([rec.to_dict() for rec in records], f, ensure_ascii=False, indent=2)

    print(f"Wrote global summary to: {args.output}")


if __name__ == "__main__":
    main()
