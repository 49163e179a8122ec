"""Run the workshop pipeline and write each figure to an HTML file.

Usage:
    python examples/workshop_demo.py [config.json] [out_dir]

With no config, a synthetic recording is written to a temp dir and sliced
into three periods.
"""

import sys
import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from nicuvitals.core.schema import PMA_24_WEEKS, PMA_34_WEEKS, PMA_64_WEEKS
from nicuvitals.utils.logging import configure_logging, get_logger
from nicuvitals.workshop import PeriodRange, WorkshopConfig, run_workshop

logger = get_logger(__name__)


def make_synthetic_recording(path: Path, n: int = 30_000, seed: int = 0) -> Path:
    """Write a fake 1 Hz HR/SpO2 recording with slow drift to a feather file."""
    rng = np.random.default_rng(seed)
    t = np.arange(n, dtype=float)
    hr = 160 - 25 * t / n + 5 * np.sin(t / 600) + rng.normal(0, 4, n)
    spo2 = np.clip(92 + 5 * t / n + rng.normal(0, 3, n), 40, 100)
    pd.DataFrame({"TIME": t, "HR": hr, "SPO2.PCT": spo2}).to_feather(path)
    return path


def demo_config(tmp: Path) -> WorkshopConfig:
    data = make_synthetic_recording(tmp / "vitals.feather")
    return WorkshopConfig(
        data_path=data,
        periods=[
            PeriodRange(PMA_24_WEEKS, 0, 5_000),
            PeriodRange(PMA_34_WEEKS, 12_000, 17_000),
            PeriodRange(PMA_64_WEEKS, 25_000, 30_000),
        ],
        density_adjust=2.0,
    )


def main() -> None:
    configure_logging(level="INFO")
    tmp = Path(tempfile.mkdtemp(prefix="nicuvitals_"))
    config = WorkshopConfig.from_json(sys.argv[1]) if len(sys.argv) > 1 else demo_config(tmp)
    out_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else tmp / "figures"
    out_dir.mkdir(parents=True, exist_ok=True)

    result = run_workshop(config)
    print(result.stats)

    for name, fig_dict in result.figures.items():
        out = out_dir / (name.replace(":", "_").replace(" ", "_").replace(".", "") + ".html")
        go.Figure(fig_dict).write_html(out)
    logger.info(f"Wrote {len(result.figures)} figures to {out_dir}")


if __name__ == "__main__":
    main()
