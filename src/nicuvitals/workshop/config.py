"""Configuration for a workshop run.

A WorkshopConfig names the input file and the fixed row ranges to slice, plus
summary parameters. The input path is always explicit; nothing here assumes a
location on disk.
"""

from __future__ import annotations

import json
import operator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from nicuvitals.core.errors import ValidationError
from nicuvitals.core.schema import HR_COL, SPO2_COL, TIME_COL


@dataclass(frozen=True)
class PeriodRange:
    """A labeled row range [start, end) of the vitals table."""

    label: str
    start: int
    end: int

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PeriodRange":
        try:
            label, start, end = data["label"], data["start"], data["end"]
        except KeyError as exc:
            raise ValidationError("config", f"period entry {data!r} is missing {exc}") from exc
        except TypeError as exc:
            raise ValidationError("config", f"period entry {data!r} is not a mapping") from exc
        return cls(label=str(label), start=_row_offset(start, data), end=_row_offset(end, data))


def _row_offset(value: Any, entry: dict[str, Any]) -> int:
    # bool is an int subclass; floats and numeric strings are not offsets
    if isinstance(value, bool):
        raise ValidationError("config", f"period entry {entry!r}: row offsets must be integers, got {value!r}")
    try:
        return operator.index(value)
    except TypeError as exc:
        raise ValidationError("config", f"period entry {entry!r}: row offsets must be integers, got {value!r}") from exc


@dataclass
class WorkshopConfig:
    """Parameters for run_workshop().

    Attributes:
        data_path: Vitals table file (.feather, .parquet or .csv).
        periods: Labeled row ranges, in display order.
        value_column: Column summarized by histograms and densities.
        time_column: Column used as the x-axis of line figures.
        line_columns: Columns drawn as time-series line figures.
        histogram_bin_width: Histogram bin width.
        histogram_domain: (min, max) histogram domain; values outside are dropped.
        density_adjust: Multiplier on the density bandwidth.
        trend_frac: LOWESS span for trend overlays.
        long_format_path: Optional pre-serialized long-format table used for the
            density step instead of combining the periods.
    """

    data_path: Path
    periods: list[PeriodRange]
    value_column: str = SPO2_COL
    time_column: str = TIME_COL
    line_columns: list[str] = field(default_factory=lambda: [HR_COL, SPO2_COL])
    histogram_bin_width: float = 1.0
    histogram_domain: tuple[float, float] = (25.0, 100.0)
    density_adjust: float = 1.0
    trend_frac: float = 0.1
    long_format_path: Optional[Path] = None

    def __post_init__(self) -> None:
        self.data_path = Path(self.data_path)
        if self.long_format_path is not None:
            self.long_format_path = Path(self.long_format_path)
        bad_domain = f"histogram_domain must be a (min, max) pair of numbers, got {self.histogram_domain!r}"
        if isinstance(self.histogram_domain, str):
            raise ValidationError("config", bad_domain)
        try:
            self.histogram_domain = tuple(float(v) for v in self.histogram_domain)
        except (TypeError, ValueError) as exc:
            raise ValidationError("config", bad_domain) from exc
        self.validate()

    def validate(self) -> None:
        """Raise ValidationError if any field is out of range."""
        if not self.periods:
            raise ValidationError("config", "at least one period is required")
        for p in self.periods:
            if not isinstance(p, PeriodRange):
                raise ValidationError("config", f"periods must be PeriodRange, got {type(p).__name__}")
            if not p.label:
                raise ValidationError("config", f"period {p!r} has an empty label")
        labels = [p.label for p in self.periods]
        if len(set(labels)) != len(labels):
            raise ValidationError("config", f"period labels must be unique, got {labels}")
        if len(self.histogram_domain) != 2 or not self.histogram_domain[1] > self.histogram_domain[0]:
            raise ValidationError("config", f"histogram_domain must be (min, max) with max > min, got {self.histogram_domain}")
        if not self.histogram_bin_width > 0:
            raise ValidationError("config", f"histogram_bin_width must be > 0, got {self.histogram_bin_width}")
        if not self.density_adjust > 0:
            raise ValidationError("config", f"density_adjust must be > 0, got {self.density_adjust}")
        if not 0 < self.trend_frac <= 1:
            raise ValidationError("config", f"trend_frac must be in (0, 1], got {self.trend_frac}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "data_path": str(self.data_path),
            "periods": [p.to_dict() for p in self.periods],
            "value_column": self.value_column,
            "time_column": self.time_column,
            "line_columns": list(self.line_columns),
            "histogram_bin_width": self.histogram_bin_width,
            "histogram_domain": list(self.histogram_domain),
            "density_adjust": self.density_adjust,
            "trend_frac": self.trend_frac,
            "long_format_path": str(self.long_format_path) if self.long_format_path else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkshopConfig":
        """Build from a dict as produced by to_dict(); missing optional keys use defaults."""
        if "data_path" not in data:
            raise ValidationError("config", "data_path is required")
        kwargs = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        unknown = sorted(set(data) - set(kwargs))
        if unknown:
            raise ValidationError("config", f"unknown config keys {unknown}")
        kwargs["periods"] = [PeriodRange.from_dict(p) for p in data.get("periods", [])]
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "WorkshopConfig":
        """Load from a JSON file. Relative data paths resolve against the file's directory."""
        p = Path(path)
        try:
            data = json.loads(p.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise ValidationError("config", f"could not read config {p}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValidationError("config", f"config {p} must contain a JSON object")
        for key in ("data_path", "long_format_path"):
            if data.get(key) and not Path(data[key]).is_absolute():
                data[key] = str(p.parent / data[key])
        return cls.from_dict(data)
