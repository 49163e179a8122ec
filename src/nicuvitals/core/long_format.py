"""Stack labeled selections into one long-format table.

A long-format table holds every selection's rows one after another, with a
categorical ``period`` column naming the selection each row came from.

Duplicate labels are allowed: two distinct selections given the same label
end up in one display group sharing that label.
"""

from __future__ import annotations

from typing import Iterator, Sequence

import pandas as pd

from nicuvitals.core.errors import ValidationError
from nicuvitals.core.schema import PERIOD_COL
from nicuvitals.utils.logging import get_logger

logger = get_logger(__name__)


def combine(
    labeled_selections: Sequence[tuple[pd.DataFrame, str]],
    *,
    period_col: str = PERIOD_COL,
) -> pd.DataFrame:
    """Concatenate (selection, label) pairs in order, tagging each row with its label.

    Args:
        labeled_selections: Ordered (selection, label) pairs.
        period_col: Name of the added categorical column.

    Returns:
        DataFrame with a fresh RangeIndex, the selections' columns, and an ordered
        categorical period_col whose categories are the labels in first-appearance order.

    Raises:
        ValidationError: If no pairs are given, a selection is empty, a label is
            not a non-empty string, selections have different columns, or a
            selection already has period_col.
    """
    pairs = list(labeled_selections)
    if not pairs:
        raise ValidationError("combine", "no selections given")

    columns = None
    frames = []
    labels: list[str] = []
    for i, pair in enumerate(pairs):
        try:
            sel, label = pair
        except (TypeError, ValueError) as exc:
            raise ValidationError("combine", f"item {i} is not a (selection, label) pair") from exc
        if not isinstance(sel, pd.DataFrame):
            raise ValidationError("combine", f"item {i}: selection is {type(sel).__name__}, not a DataFrame")
        if not isinstance(label, str) or not label.strip():
            raise ValidationError("combine", f"item {i}: label must be a non-empty string, got {label!r}")
        if len(sel) == 0:
            raise ValidationError("combine", f"selection {label!r} (item {i}) is empty")
        if period_col in sel.columns:
            raise ValidationError("combine", f"selection {label!r} already has a {period_col!r} column")
        if columns is None:
            columns = list(sel.columns)
        elif list(sel.columns) != columns:
            raise ValidationError(
                "combine",
                f"selection {label!r} has columns {list(sel.columns)}, expected {columns}",
            )
        frames.append(sel)
        labels.extend([label] * len(sel))

    long_df = pd.concat(frames, ignore_index=True)
    categories = list(dict.fromkeys(label for _, label in pairs))
    long_df[period_col] = pd.Categorical(labels, categories=categories, ordered=True)

    logger.info(f"combine: {len(pairs)} selections -> {len(long_df)} rows, periods={categories}")
    return long_df


def split(long_table: pd.DataFrame, *, period_col: str = PERIOD_COL) -> list[tuple[str, pd.DataFrame]]:
    """Inverse view of combine(): (label, rows) per period, period column dropped.

    Periods with no rows are skipped. Each returned frame is a copy.

    Raises:
        ValidationError: If period_col is missing.
    """
    if period_col not in long_table.columns:
        raise ValidationError("combine", f"long table has no {period_col!r} column")
    out = []
    for label, sub in iter_periods(long_table, period_col=period_col):
        out.append((str(label), sub.drop(columns=[period_col]).copy()))
    return out


def iter_periods(long_table: pd.DataFrame, *, period_col: str = PERIOD_COL) -> Iterator[tuple[object, pd.DataFrame]]:
    """Yield (label, rows) for each non-empty period, in category order.

    Row order in the table does not matter. A period column that is not
    categorical is taken in first-appearance order.
    """
    column = long_table[period_col]
    if isinstance(column.dtype, pd.CategoricalDtype):
        labels = list(column.cat.categories)
    else:
        labels = list(pd.unique(column.dropna()))
    for label in labels:
        sub = long_table[column == label]
        if len(sub):
            yield label, sub
