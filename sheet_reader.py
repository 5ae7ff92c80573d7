"""Decode the first sheet of an uploaded workbook into plain rows of raw cell values."""

from __future__ import annotations

import io
import logging
from typing import List

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
OLE_MAGIC = b"\xd0\xcf\x11\xe0"
SEPARATORS = (",", ";", "\t")


def _trim(row: list) -> list:
    while row and row[-1] is None:
        row.pop()
    return row


def _frame_to_rows(df: pd.DataFrame) -> List[list]:
    return [
        _trim([None if pd.isna(v) else v for v in values])
        for values in df.itertuples(index=False, name=None)
    ]


def _guess_separator(lines: List[str]) -> str:
    counts = {sep: sum(line.count(sep) for line in lines) for sep in SEPARATORS}
    best = max(SEPARATORS, key=lambda sep: counts[sep])
    return best if counts[best] else ","


def _text_to_rows(data: bytes) -> List[list]:
    text = data.decode("utf-8-sig")
    lines = text.splitlines()
    if not text.strip():
        return []

    sep = _guess_separator(lines[:50])
    # Widest line fixes the column count so ragged rows do not trip the parser.
    width = max(line.count(sep) for line in lines) + 1
    df = pd.read_csv(
        io.StringIO(text),
        sep=sep,
        header=None,
        names=list(range(width)),
        index_col=False,
        dtype=object,
        engine="python",
        keep_default_na=False,
        skip_blank_lines=False,
    )
    df = df.replace(r"^\s*$", np.nan, regex=True)
    return _frame_to_rows(df)


def read_first_sheet(data: bytes) -> List[list]:
    """Return the first sheet of *data* as a list of rows (no header row assumed).

    ``.xlsx`` content is read through pandas/openpyxl; anything that is not a
    zip container is treated as delimited UTF-8 text. Rows keep their own
    length, so ragged exports are preserved as-is.
    """

    if data.startswith(OLE_MAGIC):
        raise ValueError("Legacy .xls workbooks are not supported; save the file as .xlsx or .csv")

    if data.startswith(ZIP_MAGIC):
        df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=object, engine="openpyxl")
        rows = _frame_to_rows(df)
    else:
        rows = _text_to_rows(data)

    logger.debug("Decoded %d rows", len(rows))
    return rows
