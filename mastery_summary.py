"""Utilities for deriving mastery-band summaries from per-student score tables."""

from __future__ import annotations

from typing import Dict, Iterable

import numpy as np
import pandas as pd

from indicators import homogeneity_index

CATEGORY_ORDER: Iterable[str] = (
    "Evaluated",
    "Controlled",
    "Partial",
    "Limited",
)


def _category_counts(working: pd.DataFrame) -> Dict[str, int]:
    bands = working["mastery"].value_counts()
    return {
        "Evaluated": int(working["student_id"].nunique()),
        "Controlled": int(bands.get("controlled", 0)),
        "Partial": int(bands.get("partial", 0)),
        "Limited": int(bands.get("limited", 0)),
    }


def build_mastery_summary(scores: pd.DataFrame) -> pd.DataFrame:
    """Return mastery-band counts and percentages from the student scores table."""

    columns = ["Category", "Count", "Percent"]

    if scores is None or scores.empty or "mastery" not in scores.columns:
        return pd.DataFrame(columns=columns)

    working = scores[scores["graded"] > 0].copy()
    if working.empty:
        return pd.DataFrame(columns=columns)

    counts = _category_counts(working)
    evaluated = counts["Evaluated"]

    rows = []
    for label in CATEGORY_ORDER:
        count = counts[label]
        rows.append({
            "Category": label,
            "Count": count,
            "Percent": round(count / evaluated * 100, 2) if evaluated else 0.0,
        })

    summary = pd.DataFrame(rows, columns=columns)
    return summary


def build_group_ranking(scores: pd.DataFrame, by: str = "class_name") -> pd.DataFrame:
    """Per *by* group: mean composite and axis percentages, controlled share, homogeneity. Best group first."""

    axis_cols = [] if scores is None else [c for c in scores.columns if str(c).startswith("axis_")]
    mean_axis_cols = [f"mean_{c}" for c in axis_cols]
    columns = [by, "students", "mean_composite", *mean_axis_cols, "controlled_pct", "homogeneity"]
    if scores is None or scores.empty or by not in scores.columns:
        return pd.DataFrame(columns=columns)

    working = scores[scores["graded"] > 0].copy()
    if working.empty:
        return pd.DataFrame(columns=columns)

    working["controlled_flag"] = (working["mastery"] == "controlled").astype(int)
    aggregations = {
        "students": ("student_id", "nunique"),
        "mean_composite": ("composite", "mean"),
        "controlled": ("controlled_flag", "sum"),
        "homogeneity": ("composite", homogeneity_index),
    }
    for col, mean_col in zip(axis_cols, mean_axis_cols):
        aggregations[mean_col] = (col, "mean")
    ranking = working.groupby(by, dropna=False).agg(**aggregations).reset_index()
    for col in ["mean_composite", *mean_axis_cols]:
        ranking[col] = ranking[col].astype(float).round(2)
    ranking["controlled_pct"] = np.where(
        ranking["students"] > 0,
        (ranking["controlled"] / ranking["students"] * 100).round(2),
        np.nan,
    )
    ranking["homogeneity"] = ranking["homogeneity"].round(2)
    ranking = ranking.sort_values("mean_composite", ascending=False, kind="mergesort").reset_index(drop=True)
    return ranking[columns]
