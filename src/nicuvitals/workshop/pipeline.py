"""Linear workshop pipeline: load, slice, summarize, reshape, draw.

Each stage runs once. Errors from any stage propagate unchanged; the stage
name is part of the error message.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from nicuvitals.core.errors import ValidationError
from nicuvitals.core.long_format import combine, iter_periods
from nicuvitals.core.range_selector import select_many
from nicuvitals.core.schema import PERIOD_COL, REQUIRED_COLUMNS
from nicuvitals.core.summary_builder import (
    DensityEstimate,
    HistogramSummary,
    histogram,
    kernel_density,
    summarize_by_period,
)
from nicuvitals.core.table_loader import load_long_format_table, load_vitals_table
from nicuvitals.plotting.figure_generator import (
    density_figure,
    histogram_figure,
    line_figure,
    period_line_figure,
)
from nicuvitals.utils.logging import get_logger
from nicuvitals.workshop.config import WorkshopConfig

logger = get_logger(__name__)


@dataclass
class WorkshopResult:
    """Everything derived by run_workshop().

    Attributes:
        table: The loaded vitals table (never modified).
        selections: Row-range selection per period label, in config order.
        long_table: Long-format table of all selections (or the loaded
            pre-serialized one when config.long_format_path is set).
        histograms: HistogramSummary of config.value_column per period.
        densities: DensityEstimate of config.value_column per period.
        stats: Per-period descriptive statistics of config.value_column.
        figures: Plotly figure dicts keyed by name.
    """

    table: pd.DataFrame
    selections: dict[str, pd.DataFrame]
    long_table: pd.DataFrame
    histograms: dict[str, HistogramSummary]
    densities: dict[str, DensityEstimate]
    stats: pd.DataFrame
    figures: dict[str, dict] = field(default_factory=dict)


def densities_from_long_format(
    long_table: pd.DataFrame,
    column: str,
    bandwidth_adjust: float = 1.0,
    *,
    period_col: str = PERIOD_COL,
) -> dict[str, DensityEstimate]:
    """One kernel-density estimate of column per period, in period order.

    Raises:
        ValidationError: If period_col or column is missing.
        EmptyInputError: If a period has no finite values.
    """
    for col in (period_col, column):
        if col not in long_table.columns:
            raise ValidationError("kernel_density", f"long table has no column {col!r}")
    out: dict[str, DensityEstimate] = {}
    for label, sub in iter_periods(long_table, period_col=period_col):
        out[str(label)] = kernel_density(sub[column], bandwidth_adjust)
    return out


def run_workshop(config: WorkshopConfig, *, make_figures: bool = True) -> WorkshopResult:
    """Run the full workshop sequence described by config.

    Args:
        config: Input path, period ranges and summary parameters.
        make_figures: If False, skip Plotly figure generation.

    Returns:
        WorkshopResult with all derived tables, summaries and figures.

    Raises:
        LoadError, RangeError, EmptyInputError, ValidationError: From the
            stage that failed.
    """
    logger.info(f"run_workshop: data={config.data_path}, periods={[p.label for p in config.periods]}")

    table = load_vitals_table(config.data_path, required_columns=_required_columns(config))

    selections = select_many(table, [(p.label, p.start, p.end) for p in config.periods])
    for label, sel in selections.items():
        logger.info(f"period {label!r}: {len(sel)} rows")

    if config.long_format_path is not None:
        long_table = load_long_format_table(config.long_format_path, value_columns=[config.value_column])
    else:
        long_table = combine([(sel, label) for label, sel in selections.items()])

    dmin, dmax = config.histogram_domain
    histograms = {
        label: histogram(sel[config.value_column], config.histogram_bin_width, dmin, dmax)
        for label, sel in selections.items()
    }
    densities = densities_from_long_format(long_table, config.value_column, config.density_adjust)
    stats = summarize_by_period(long_table, config.value_column)

    result = WorkshopResult(
        table=table,
        selections=selections,
        long_table=long_table,
        histograms=histograms,
        densities=densities,
        stats=stats,
    )
    if make_figures:
        result.figures = build_figures(result, config)
    logger.info(f"run_workshop: done, figures={len(result.figures)}")
    return result


def build_figures(result: WorkshopResult, config: WorkshopConfig) -> dict[str, dict]:
    """Plotly figure dicts for a WorkshopResult, keyed "<kind>:<label>:<column>"."""
    figures: dict[str, dict] = {}
    for label, sel in result.selections.items():
        for col in config.line_columns:
            figures[f"line:{label}:{col}"] = line_figure(
                sel,
                col,
                xcol=config.time_column,
                trend_frac=config.trend_frac,
                title=f"{col} at {label}",
            )
    for col in config.line_columns:
        if config.time_column in result.long_table.columns and col in result.long_table.columns:
            figures[f"period_line:all:{col}"] = period_line_figure(
                result.long_table,
                col,
                xcol=config.time_column,
                trend_frac=config.trend_frac,
                title=f"{col} by period",
            )
    for label, summary in result.histograms.items():
        figures[f"histogram:{label}:{config.value_column}"] = histogram_figure(
            summary, xlabel=config.value_column, title=f"{config.value_column} at {label}"
        )
    figures[f"density:all:{config.value_column}"] = density_figure(
        result.densities, xlabel=config.value_column, title=f"{config.value_column} density by period"
    )
    return figures


def _required_columns(config: WorkshopConfig) -> list[str]:
    cols = [*REQUIRED_COLUMNS, config.time_column, config.value_column, *config.line_columns]
    return list(dict.fromkeys(cols))
