"""
nicuvitals: NICU vital-signs tables, row-range views and their summaries.

This package provides:
- core: load a vitals table, select row ranges, build histogram and
  kernel-density summaries, stack selections into long format
- plotting: Plotly figure dicts for line/trend, histogram and density views
- workshop: a configurable end-to-end run over fixed row ranges
- Logging utilities for library and script use

For logging output in standalone scripts:
    ```python
    from nicuvitals.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from nicuvitals.utils.logging import configure_logging, get_logger

from nicuvitals.core import (
    DensityEstimate,
    EmptyInputError,
    HistogramSummary,
    LoadError,
    RangeError,
    ValidationError,
    VitalsError,
    combine,
    histogram,
    kernel_density,
    load_long_format_table,
    load_vitals_table,
    select,
)

# NullHandler so logs don't reach the root logger unless a script
# calls configure_logging().
_logger = logging.getLogger("nicuvitals")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "DensityEstimate",
    "EmptyInputError",
    "HistogramSummary",
    "LoadError",
    "RangeError",
    "ValidationError",
    "VitalsError",
    "combine",
    "configure_logging",
    "get_logger",
    "histogram",
    "kernel_density",
    "load_long_format_table",
    "load_vitals_table",
    "select",
]

__version__ = "0.1.0"
