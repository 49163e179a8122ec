"""Core data logic: load a vitals table, slice it, summarize and reshape the slices.

Nothing in this subpackage imports a plotting library.
"""

from nicuvitals.core.errors import (
    EmptyInputError,
    LoadError,
    RangeError,
    ValidationError,
    VitalsError,
)
from nicuvitals.core.long_format import combine, iter_periods, split
from nicuvitals.core.range_selector import select, select_many
from nicuvitals.core.summary_builder import (
    DensityEstimate,
    HistogramSummary,
    describe,
    histogram,
    kernel_density,
    summarize_by_period,
)
from nicuvitals.core.table_loader import load_long_format_table, load_vitals_table

__all__ = [
    "DensityEstimate",
    "EmptyInputError",
    "HistogramSummary",
    "LoadError",
    "RangeError",
    "ValidationError",
    "VitalsError",
    "combine",
    "describe",
    "histogram",
    "iter_periods",
    "kernel_density",
    "load_long_format_table",
    "load_vitals_table",
    "select",
    "select_many",
    "split",
    "summarize_by_period",
]
