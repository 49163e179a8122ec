"""Unit tests for WorkshopConfig / PeriodRange serialization and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nicuvitals.core.errors import ValidationError
from nicuvitals.workshop.config import PeriodRange, WorkshopConfig


def _config(**overrides) -> WorkshopConfig:
    kwargs = dict(
        data_path="vitals.feather",
        periods=[PeriodRange("24 weeks", 0, 10), PeriodRange("34 weeks", 20, 30)],
    )
    kwargs.update(overrides)
    return WorkshopConfig(**kwargs)


def test_defaults():
    cfg = _config()
    assert cfg.data_path == Path("vitals.feather")
    assert cfg.value_column == "SPO2.PCT"
    assert cfg.histogram_domain == (25.0, 100.0)
    assert cfg.line_columns == ["HR", "SPO2.PCT"]


def test_to_dict_from_dict_round_trip():
    cfg = _config(density_adjust=2.0, histogram_bin_width=2.5)
    restored = WorkshopConfig.from_dict(cfg.to_dict())
    assert restored == cfg


def test_to_dict_is_json_serializable():
    json.dumps(_config(long_format_path="long.pkl").to_dict())


def test_from_dict_requires_data_path():
    with pytest.raises(ValidationError) as exc_info:
        WorkshopConfig.from_dict({"periods": []})
    assert "data_path" in str(exc_info.value)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValidationError) as exc_info:
        WorkshopConfig.from_dict({
            "data_path": "x.feather",
            "periods": [{"label": "a", "start": 0, "end": 1}],
            "bins": 10,
        })
    assert "bins" in str(exc_info.value)


def test_period_from_dict_missing_key_raises():
    with pytest.raises(ValidationError):
        PeriodRange.from_dict({"label": "a", "start": 0})


@pytest.mark.parametrize("start", [2.7, "5", True, None])
def test_period_from_dict_rejects_non_integer_offsets(start):
    """Fractional, string and bool offsets fail instead of being truncated or coerced."""
    with pytest.raises(ValidationError) as exc_info:
        PeriodRange.from_dict({"label": "a", "start": start, "end": 10})
    assert exc_info.value.stage == "config"
    assert repr(start) in str(exc_info.value)


def test_period_from_dict_accepts_integral_offsets():
    assert PeriodRange.from_dict({"label": 24, "start": 0, "end": 10}) == PeriodRange("24", 0, 10)


def test_from_dict_fractional_offset_raises():
    with pytest.raises(ValidationError):
        WorkshopConfig.from_dict({"data_path": "x.feather", "periods": [{"label": "a", "start": 0, "end": 9.5}]})


def test_no_periods_raises():
    with pytest.raises(ValidationError):
        _config(periods=[])


def test_duplicate_period_labels_raise():
    with pytest.raises(ValidationError):
        _config(periods=[PeriodRange("a", 0, 1), PeriodRange("a", 2, 3)])


@pytest.mark.parametrize(
    "overrides",
    [
        {"histogram_domain": (100.0, 25.0)},
        {"histogram_bin_width": 0},
        {"density_adjust": -1.0},
        {"trend_frac": 0.0},
        {"trend_frac": 1.5},
    ],
)
def test_invalid_parameters_raise(overrides):
    with pytest.raises(ValidationError) as exc_info:
        _config(**overrides)
    assert exc_info.value.stage == "config"


@pytest.mark.parametrize("domain", [["a", "b"], 5, "25,100", None])
def test_malformed_histogram_domain_raises(domain):
    with pytest.raises(ValidationError) as exc_info:
        WorkshopConfig.from_dict({
            "data_path": "x.feather",
            "periods": [{"label": "a", "start": 0, "end": 1}],
            "histogram_domain": domain,
        })
    assert exc_info.value.stage == "config"
    assert "histogram_domain" in str(exc_info.value)


def test_from_json_resolves_relative_paths(tmp_path: Path):
    cfg_path = tmp_path / "workshop.json"
    cfg_path.write_text(json.dumps({
        "data_path": "vitals.feather",
        "periods": [{"label": "24 weeks", "start": 0, "end": 10}],
        "histogram_domain": [25, 100],
    }))
    cfg = WorkshopConfig.from_json(cfg_path)
    assert cfg.data_path == tmp_path / "vitals.feather"
    assert cfg.periods == [PeriodRange("24 weeks", 0, 10)]
    assert cfg.histogram_domain == (25.0, 100.0)


def test_from_json_bad_file_raises(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ValidationError):
        WorkshopConfig.from_json(bad)
    with pytest.raises(ValidationError):
        WorkshopConfig.from_json(tmp_path / "missing.json")


def test_example_config_parses():
    """examples/workshop.json stays loadable."""
    example = Path(__file__).resolve().parents[2] / "examples" / "workshop.json"
    if not example.exists():
        pytest.skip("examples/workshop.json not found")
    cfg = WorkshopConfig.from_json(example)
    assert [p.label for p in cfg.periods] == ["24 weeks", "34 weeks", "64 weeks"]
