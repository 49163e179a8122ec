"""Contiguous row-range selection from a vitals table."""

from __future__ import annotations

import operator
from typing import Any, Iterable

import pandas as pd

from nicuvitals.core.errors import RangeError, ValidationError
from nicuvitals.utils.logging import get_logger

logger = get_logger(__name__)


def _as_offset(value: Any, name: str) -> int:
    # bool is an int subclass
    if isinstance(value, bool):
        raise RangeError("select", f"{name} must be an integer offset, got {value!r}")
    try:
        return operator.index(value)
    except TypeError as exc:
        raise RangeError("select", f"{name} must be an integer offset, got {value!r}") from exc


def select(table: pd.DataFrame, start: int, end: int) -> pd.DataFrame:
    """Return a copy of rows [start, end) of table.

    The result keeps the source index labels and column order. start == end
    gives an empty table with the same columns. The result never shares
    memory with table.

    Raises:
        RangeError: If start < 0, end > len(table), start > end, or either
            bound is not an integer.
    """
    start = _as_offset(start, "start")
    end = _as_offset(end, "end")
    n = len(table)
    if start < 0:
        raise RangeError("select", f"start={start} is negative")
    if end > n:
        raise RangeError("select", f"end={end} exceeds row count {n}")
    if start > end:
        raise RangeError("select", f"start={start} is greater than end={end}")

    sub = table.iloc[start:end].copy(deep=True)
    logger.debug(f"select [{start}, {end}) -> {len(sub)} rows")
    return sub


def select_many(
    table: pd.DataFrame,
    ranges: Iterable[tuple[str, int, int]],
) -> dict[str, pd.DataFrame]:
    """Apply select() for each (label, start, end), keeping input order.

    Raises:
        RangeError: On the first invalid range.
        ValidationError: If a label repeats.
    """
    out: dict[str, pd.DataFrame] = {}
    for label, start, end in ranges:
        if label in out:
            raise ValidationError("select", f"duplicate range label {label!r}")
        out[label] = select(table, start, end)
    return out
