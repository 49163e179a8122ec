"""End-to-end workshop run: configuration and pipeline."""

from nicuvitals.workshop.config import PeriodRange, WorkshopConfig
from nicuvitals.workshop.pipeline import (
    WorkshopResult,
    build_figures,
    densities_from_long_format,
    run_workshop,
)

__all__ = [
    "PeriodRange",
    "WorkshopConfig",
    "WorkshopResult",
    "build_figures",
    "densities_from_long_format",
    "run_workshop",
]
