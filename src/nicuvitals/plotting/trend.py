"""Smoothed trend lines for time-series overlays (LOWESS)."""

from __future__ import annotations

import numpy as np
import pandas as pd
from statsmodels.nonparametric.smoothers_lowess import lowess

from nicuvitals.utils.logging import get_logger

logger = get_logger(__name__)


def lowess_trend(
    x: pd.Series | np.ndarray,
    y: pd.Series | np.ndarray,
    *,
    frac: float = 0.1,
    it: int = 0,
    delta_frac: float = 0.01,
) -> tuple[np.ndarray, np.ndarray]:
    """Locally weighted trend of y against x.

    Pairs with a NaN in x or y are dropped. delta is set to delta_frac of the
    x range so long recordings stay fast; it=0 skips robustifying iterations.

    Args:
        x: Independent values (e.g. TIME).
        y: Dependent values (e.g. HR).
        frac: Fraction of points used for each local fit, in (0, 1].
        it: Number of robustifying iterations.
        delta_frac: Interpolation distance as a fraction of the x range.

    Returns:
        (x_sorted, y_smoothed). Empty arrays when fewer than 3 valid points remain.
    """
    if not 0 < frac <= 1:
        raise ValueError(f"frac must be in (0, 1], got {frac!r}")
    xa = np.asarray(x, dtype=float)
    ya = np.asarray(y, dtype=float)
    if xa.shape != ya.shape:
        raise ValueError(f"x and y must have the same length, got {xa.shape} and {ya.shape}")
    ok = np.isfinite(xa) & np.isfinite(ya)
    xa, ya = xa[ok], ya[ok]
    if xa.size < 3:
        logger.warning(f"lowess_trend: only {xa.size} valid points, no trend drawn")
        return np.array([], dtype=float), np.array([], dtype=float)

    delta = delta_frac * float(xa.max() - xa.min())
    fitted = lowess(ya, xa, frac=frac, it=it, delta=delta, return_sorted=True)
    return fitted[:, 0], fitted[:, 1]
