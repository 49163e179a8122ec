"""End-to-end tests for run_workshop over a small feather file."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from nicuvitals.core.errors import LoadError, RangeError, ValidationError
from nicuvitals.core.long_format import combine
from nicuvitals.core.range_selector import select
from nicuvitals.workshop.config import PeriodRange, WorkshopConfig
from nicuvitals.workshop.pipeline import densities_from_long_format, run_workshop


@pytest.fixture
def config(vitals_feather: Path) -> WorkshopConfig:
    return WorkshopConfig(
        data_path=vitals_feather,
        periods=[
            PeriodRange("24 weeks", 0, 30),
            PeriodRange("34 weeks", 30, 60),
            PeriodRange("64 weeks", 60, 100),
        ],
        histogram_bin_width=1.0,
        density_adjust=2.0,
        trend_frac=0.5,
    )


def test_run_workshop_derives_every_view(config, vitals_df):
    result = run_workshop(config)

    pd.testing.assert_frame_equal(result.table, vitals_df)
    assert list(result.selections) == ["24 weeks", "34 weeks", "64 weeks"]
    assert [len(s) for s in result.selections.values()] == [30, 30, 40]
    assert len(result.long_table) == 100
    assert list(result.long_table["period"].cat.categories) == ["24 weeks", "34 weeks", "64 weeks"]

    for label, sel in result.selections.items():
        h = result.histograms[label]
        in_domain = sel["SPO2.PCT"].between(25, 100).sum()
        assert h.total == in_domain

    assert list(result.densities) == ["24 weeks", "34 weeks", "64 weeks"]
    assert all(d.adjust == 2.0 for d in result.densities.values())
    assert list(result.stats.index) == ["24 weeks", "34 weeks", "64 weeks"]


def test_run_workshop_figures(config):
    result = run_workshop(config)
    figs = result.figures
    assert "line:24 weeks:HR" in figs
    assert "line:64 weeks:SPO2.PCT" in figs
    assert "period_line:all:HR" in figs
    assert "histogram:34 weeks:SPO2.PCT" in figs
    assert "density:all:SPO2.PCT" in figs
    assert len(figs["density:all:SPO2.PCT"]["data"]) == 3


def test_run_workshop_without_figures(config):
    result = run_workshop(config, make_figures=False)
    assert result.figures == {}


def test_run_workshop_does_not_modify_source(config):
    result = run_workshop(config, make_figures=False)
    before = result.table.copy()
    result.selections["24 weeks"].loc[:, "HR"] = 0.0
    pd.testing.assert_frame_equal(result.table, before)


def test_run_workshop_uses_pre_serialized_long_table(config, vitals_df, tmp_path: Path):
    """long_format_path replaces the combined table for the density step."""
    long_df = combine([(select(vitals_df, 0, 10), "only")])
    path = tmp_path / "long.pkl"
    long_df.to_pickle(path)

    cfg = WorkshopConfig.from_dict({**config.to_dict(), "long_format_path": str(path)})
    result = run_workshop(cfg, make_figures=False)
    assert list(result.densities) == ["only"]
    assert len(result.long_table) == 10
    assert len(result.histograms) == 3


def test_run_workshop_long_table_keeps_category_order(config, vitals_df, tmp_path: Path):
    """A saved table whose rows are not in category order still reports periods by category."""
    long_df = combine([(select(vitals_df, 0, 10), "A"), (select(vitals_df, 10, 20), "B")])
    long_df["period"] = long_df["period"].cat.reorder_categories(["B", "A"])
    path = tmp_path / "long.pkl"
    long_df.to_pickle(path)

    cfg = WorkshopConfig.from_dict({**config.to_dict(), "long_format_path": str(path)})
    result = run_workshop(cfg)
    assert list(result.densities) == ["B", "A"]
    assert list(result.stats.index) == ["B", "A"]
    assert [t["name"] for t in result.figures["density:all:SPO2.PCT"]["data"]] == ["B", "A"]


def test_run_workshop_missing_file_raises_load_error(config, tmp_path: Path):
    cfg = WorkshopConfig.from_dict({**config.to_dict(), "data_path": str(tmp_path / "gone.feather")})
    with pytest.raises(LoadError):
        run_workshop(cfg)


def test_run_workshop_out_of_range_period_raises(config):
    cfg = WorkshopConfig.from_dict({
        **config.to_dict(),
        "periods": [{"label": "too far", "start": 90, "end": 500}],
    })
    with pytest.raises(RangeError) as exc_info:
        run_workshop(cfg)
    assert "500" in str(exc_info.value)


def test_run_workshop_empty_period_raises_validation_error(config):
    cfg = WorkshopConfig.from_dict({
        **config.to_dict(),
        "periods": [{"label": "a", "start": 0, "end": 10}, {"label": "empty", "start": 5, "end": 5}],
    })
    with pytest.raises(ValidationError) as exc_info:
        run_workshop(cfg)
    assert exc_info.value.stage == "combine"


def test_densities_from_long_format_missing_column_raises(vitals_df):
    long_df = combine([(select(vitals_df, 0, 10), "a")])
    with pytest.raises(ValidationError):
        densities_from_long_format(long_df, "RESP")


def test_densities_from_long_format_follows_categories(vitals_df):
    long_df = combine([(select(vitals_df, 0, 10), "A"), (select(vitals_df, 10, 20), "B")])
    long_df["period"] = long_df["period"].cat.reorder_categories(["B", "A"])
    densities = densities_from_long_format(long_df, "SPO2.PCT")
    assert list(densities) == ["B", "A"]
    assert densities["B"].n == 10
