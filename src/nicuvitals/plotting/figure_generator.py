"""Plotly figure generation for vitals views.

Every function returns a Plotly figure dict (fig.to_dict()), never a go.Figure,
so callers can hand it to any Plotly front end. Data shaping stays in
nicuvitals.core; this module only draws.
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from nicuvitals.core.long_format import iter_periods
from nicuvitals.core.schema import PERIOD_COL, TIME_COL, column_label
from nicuvitals.core.summary_builder import DensityEstimate, HistogramSummary
from nicuvitals.plotting.theme import ThemeMode, get_theme_colors, get_theme_template, resolve_theme
from nicuvitals.plotting.trend import lowess_trend
from nicuvitals.utils.logging import get_logger

logger = get_logger(__name__)

TREND_COLOR = "rgba(220, 50, 50, 0.9)"
RAW_LINE_WIDTH = 1
TREND_LINE_WIDTH = 3

Theme = Optional[Union[str, ThemeMode]]


def _apply_layout(
    fig: go.Figure,
    theme: Theme,
    *,
    title: Optional[str],
    xlabel: str,
    ylabel: str,
    showlegend: bool,
) -> None:
    """Shared layout: template, colors, axis titles."""
    theme_mode = resolve_theme(theme)
    bg_color, fg_color = get_theme_colors(theme_mode)
    grid_color = "rgba(255,255,255,0.2)" if theme_mode is ThemeMode.DARK else "#cccccc"
    fig.update_layout(
        template=get_theme_template(theme_mode),
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        font=dict(color=fg_color),
        xaxis=dict(title=xlabel, color=fg_color, gridcolor=grid_color),
        yaxis=dict(title=ylabel, color=fg_color, gridcolor=grid_color),
        margin=dict(l=0, r=20, t=40 if title else 10, b=20),
        showlegend=showlegend,
    )
    if title:
        fig.update_layout(title=dict(text=title))


def _numeric(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        raise ValueError(f"Column {col!r} not in table; available: {list(df.columns)}")
    return pd.to_numeric(df[col], errors="coerce")


def _add_line_traces(
    fig: go.Figure,
    x: pd.Series,
    y: pd.Series,
    *,
    name: str,
    show_trend: bool,
    trend_frac: float,
    color: Optional[str] = None,
) -> None:
    fig.add_trace(go.Scattergl(
        x=x.to_numpy(),
        y=y.to_numpy(),
        mode="lines",
        name=name,
        line=dict(width=RAW_LINE_WIDTH, color=color),
        opacity=0.6 if show_trend else 1.0,
    ))
    if not show_trend:
        return
    xs, ys = lowess_trend(x, y, frac=trend_frac)
    if xs.size == 0:
        return
    fig.add_trace(go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name=f"{name} trend",
        line=dict(width=TREND_LINE_WIDTH, color=color or TREND_COLOR),
    ))


def line_figure(
    table: pd.DataFrame,
    ycol: str,
    *,
    xcol: str = TIME_COL,
    show_trend: bool = True,
    trend_frac: float = 0.1,
    title: Optional[str] = None,
    theme: Theme = None,
) -> dict:
    """Time-series line of ycol against xcol with an optional LOWESS trend overlay.

    Args:
        table: Vitals table or range selection.
        ycol: Column to plot (e.g. "HR").
        xcol: Column for the x-axis (default "TIME").
        show_trend: Overlay a smoothed trend line.
        trend_frac: LOWESS span as a fraction of points.
        title: Optional figure title.
        theme: "light" (default) or "dark".

    Returns:
        Plotly figure dict.
    """
    x = _numeric(table, xcol)
    y = _numeric(table, ycol)
    logger.info(f"line_figure: rows={len(table)}, x={xcol}, y={ycol}, trend={show_trend}")

    fig = go.Figure()
    _add_line_traces(fig, x, y, name=ycol, show_trend=show_trend, trend_frac=trend_frac)
    _apply_layout(
        fig, theme, title=title, xlabel=column_label(xcol), ylabel=column_label(ycol), showlegend=show_trend
    )
    return fig.to_dict()


def period_line_figure(
    long_table: pd.DataFrame,
    ycol: str,
    *,
    xcol: str = TIME_COL,
    period_col: str = PERIOD_COL,
    show_trend: bool = True,
    trend_frac: float = 0.1,
    title: Optional[str] = None,
    theme: Theme = None,
) -> dict:
    """One line (plus optional trend) per period of a long-format table."""
    if period_col not in long_table.columns:
        raise ValueError(f"Column {period_col!r} not in table; available: {list(long_table.columns)}")
    logger.info(f"period_line_figure: rows={len(long_table)}, y={ycol}")

    fig = go.Figure()
    for label, sub in iter_periods(long_table, period_col=period_col):
        _add_line_traces(
            fig,
            _numeric(sub, xcol),
            _numeric(sub, ycol),
            name=str(label),
            show_trend=show_trend,
            trend_frac=trend_frac,
        )
    _apply_layout(fig, theme, title=title, xlabel=column_label(xcol), ylabel=column_label(ycol), showlegend=True)
    fig.update_layout(legend_title_text=period_col)
    return fig.to_dict()


def histogram_figure(
    summary: HistogramSummary,
    *,
    xlabel: str = "",
    title: Optional[str] = None,
    theme: Theme = None,
) -> dict:
    """Bar chart of a HistogramSummary; bars span their bin edges exactly."""
    theme_mode = resolve_theme(theme)
    _, fg_color = get_theme_colors(theme_mode)

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=summary.centers,
        y=summary.counts,
        width=summary.widths,
        marker_color=fg_color,
        opacity=0.7,
        name="count",
    ))
    _apply_layout(fig, theme_mode, title=title, xlabel=column_label(xlabel), ylabel="Count", showlegend=False)
    fig.update_layout(
        bargap=0,
        xaxis_range=[summary.domain_min, summary.domain_max],
    )
    return fig.to_dict()


def density_figure(
    densities: Mapping[str, DensityEstimate],
    *,
    xlabel: str = "",
    title: Optional[str] = None,
    fill: bool = True,
    theme: Theme = None,
) -> dict:
    """Overlay one density curve per label (e.g. one per PMA period)."""
    fig = go.Figure()
    for label, est in densities.items():
        fig.add_trace(go.Scatter(
            x=np.asarray(est.x),
            y=np.asarray(est.density),
            mode="lines",
            name=str(label),
            fill="tozeroy" if fill else None,
            opacity=0.5 if fill else 1.0,
        ))
    _apply_layout(
        fig, theme, title=title, xlabel=column_label(xlabel), ylabel="Density", showlegend=len(densities) > 1
    )
    return fig.to_dict()
