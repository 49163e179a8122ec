"""Plotly rendering of vitals tables and summaries."""

from nicuvitals.plotting.figure_generator import (
    density_figure,
    histogram_figure,
    line_figure,
    period_line_figure,
)
from nicuvitals.plotting.theme import ThemeMode
from nicuvitals.plotting.trend import lowess_trend

__all__ = [
    "ThemeMode",
    "density_figure",
    "histogram_figure",
    "line_figure",
    "lowess_trend",
    "period_line_figure",
]
