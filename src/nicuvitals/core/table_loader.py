"""Load vital-signs tables from disk.

The primary input is a column-oriented Feather (Arrow IPC) file; Parquet and
CSV are accepted as well. A pre-serialized long-format table (pickle) can be
loaded as an alternate entry point for the density step.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from nicuvitals.core.errors import LoadError
from nicuvitals.core.schema import HR_COL, PERIOD_COL, REQUIRED_COLUMNS, SPO2_COL
from nicuvitals.utils.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

_TABLE_READERS = {
    ".feather": pd.read_feather,
    ".arrow": pd.read_feather,
    ".parquet": pd.read_parquet,
    ".csv": pd.read_csv,
}

_LONG_FORMAT_READERS = {
    ".pkl": pd.read_pickle,
    ".pickle": pd.read_pickle,
    ".feather": pd.read_feather,
    ".parquet": pd.read_parquet,
}


def _read(path: PathLike, readers: dict, what: str) -> pd.DataFrame:
    """Resolve a reader by suffix and read path into a DataFrame, mapping failures to LoadError."""
    p = Path(path)
    if not p.exists():
        raise LoadError("load", f"{what} not found: {p}")
    if not p.is_file():
        raise LoadError("load", f"{what} is not a file: {p}")

    reader = readers.get(p.suffix.lower())
    if reader is None:
        supported = ", ".join(sorted(readers))
        raise LoadError("load", f"unsupported {what} format {p.suffix!r} for {p} (expected one of {supported})")

    try:
        df = reader(p)
    except Exception as exc:
        raise LoadError("load", f"could not read {what} {p}: {exc}") from exc

    if not isinstance(df, pd.DataFrame):
        raise LoadError("load", f"{what} {p} did not contain a table (got {type(df).__name__})")
    return df


def _coerce_numeric(df: pd.DataFrame, columns: Iterable[str], path: PathLike) -> pd.DataFrame:
    """Cast columns to float64, raising LoadError on non-numeric content."""
    for col in columns:
        try:
            df[col] = pd.to_numeric(df[col], errors="raise").astype("float64")
        except (ValueError, TypeError) as exc:
            raise LoadError("load", f"column {col!r} in {path} is not numeric: {exc}") from exc
    return df


def _check_columns(df: pd.DataFrame, required: Iterable[str], path: PathLike) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise LoadError("load", f"{path} is missing required columns {missing}; found {list(df.columns)}")


def load_vitals_table(
    path: PathLike,
    *,
    required_columns: Iterable[str] = REQUIRED_COLUMNS,
) -> pd.DataFrame:
    """Load a vital-signs table.

    Args:
        path: Path to a .feather/.arrow, .parquet or .csv file.
        required_columns: Columns that must be present. Each is coerced to float64.

    Returns:
        DataFrame with a fresh RangeIndex, rows in file (recording) order.

    Raises:
        LoadError: If the file is missing, unreadable, of an unsupported
            format, lacks a required column, or a required column is not numeric.
    """
    required = list(required_columns)
    df = _read(path, _TABLE_READERS, "vitals table")
    _check_columns(df, required, path)
    df = _coerce_numeric(df, required, path)
    df = df.reset_index(drop=True)
    logger.info(f"Loaded vitals table {Path(path).name}: rows={len(df)}, columns={list(df.columns)}")
    return df


def load_long_format_table(
    path: PathLike,
    *,
    value_columns: Iterable[str] = (HR_COL, SPO2_COL),
    period_col: str = PERIOD_COL,
) -> pd.DataFrame:
    """Load a pre-serialized long-format table (the shape long_format.combine() returns).

    Args:
        path: Path to a pickled DataFrame (.pkl/.pickle), or .feather/.parquet.
        value_columns: Numeric columns that must be present.
        period_col: Name of the categorical period column.

    Returns:
        DataFrame whose period column is categorical. If the stored column was
        not categorical, categories follow first appearance.

    Raises:
        LoadError: If the file cannot be read or lacks the period/value columns.
    """
    values = list(value_columns)
    df = _read(path, _LONG_FORMAT_READERS, "long-format table")
    _check_columns(df, [period_col, *values], path)
    df = _coerce_numeric(df.copy(), values, path)

    if df[period_col].isna().any():
        raise LoadError("load", f"{path} has rows with no {period_col!r} value")
    if not isinstance(df[period_col].dtype, pd.CategoricalDtype):
        labels = df[period_col].astype(str)
        df[period_col] = pd.Categorical(labels, categories=list(pd.unique(labels)), ordered=True)

    df = df.reset_index(drop=True)
    logger.info(
        f"Loaded long-format table {Path(path).name}: rows={len(df)}, "
        f"periods={list(df[period_col].cat.categories)}"
    )
    return df
