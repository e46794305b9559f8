"""Normalization: turn spreadsheet cells into clean values for the row model."""

from __future__ import annotations

import re
from typing import Any

import pandas as pd

UNKNOWN = "Unknown"
UNCATEGORIZED = "Uncategorized"

_NUM_RE = re.compile(r"(-?\d+(?:\.\d+)?)")
_COL_RE = re.compile(r"[^a-z0-9]+")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    if value is pd.NaT:
        return True
    return isinstance(value, str) and not value.strip()


def clean_text(value: Any, default: str = "") -> str:
    """Strip a cell to text; blanks (None, NaN, whitespace) become ``default``."""
    if is_blank(value):
        return default
    if isinstance(value, float) and value.is_integer():
        # Excel hands back integral ids as floats
        return str(int(value))
    return str(value).strip()


def clean_number(value: Any, default: float = 0.0) -> float:
    """Parse a numeric cell such as ``3``, ``"2.5"`` or ``"IRR 4"``."""
    if is_blank(value):
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    m = _NUM_RE.search(str(value))
    if not m:
        return default
    try:
        return float(m.group(1))
    except ValueError:
        return default


def normalize_column_name(name: Any) -> str:
    """``'Case ID (Aware)'`` -> ``'case_id_aware'``."""
    return _COL_RE.sub("_", str(name).strip().lower()).strip("_")
