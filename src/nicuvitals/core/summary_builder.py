"""Histogram and kernel-density summaries over one numeric column.

Pure numpy/pandas; every function here is a pure function of its inputs.

Histogram policy: values outside [domain_min, domain_max] are clipped (dropped,
not counted). Bins are consecutive and of width bin_width starting at
domain_min; the last bin is clamped to domain_max and may be narrower. Bins are
half-open [a, b) except the last, which is closed [a, b].

Density policy: Gaussian kernel with Silverman's rule-of-thumb bandwidth
(0.9 * min(sd, IQR / 1.34) * n ** -0.2), scaled by bandwidth_adjust, evaluated on
an even grid spanning the observed value range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Union

import numpy as np
import pandas as pd

from nicuvitals.core.errors import EmptyInputError, ValidationError
from nicuvitals.core.long_format import iter_periods
from nicuvitals.core.schema import PERIOD_COL
from nicuvitals.utils.logging import get_logger

logger = get_logger(__name__)

ArrayLike = Union[pd.Series, np.ndarray, Iterable[float]]

# Stats columns for summarize_by_period().
STATS_COLUMNS = ["count", "min", "max", "mean", "median", "std", "sem", "cv"]

# Number of input values evaluated against the grid at once in kernel_density().
_KDE_CHUNK = 8192


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, copy=True)
    a.setflags(write=False)
    return a


@dataclass(frozen=True, eq=False)
class HistogramSummary:
    """Bin edges and counts over a fixed domain.

    Attributes:
        edges: Bin edges, length len(counts) + 1, ascending.
        counts: Number of in-domain values per bin (int64).
        bin_width: Nominal bin width (the last bin may be narrower).
        domain_min: Lower bound of the counted domain.
        domain_max: Upper bound of the counted domain.
        n_dropped: Number of finite values outside the domain.
    """

    edges: np.ndarray
    counts: np.ndarray
    bin_width: float
    domain_min: float
    domain_max: float
    n_dropped: int = 0

    @property
    def centers(self) -> np.ndarray:
        return (self.edges[:-1] + self.edges[1:]) / 2

    @property
    def widths(self) -> np.ndarray:
        return np.diff(self.edges)

    @property
    def total(self) -> int:
        """Number of values counted (in-domain)."""
        return int(self.counts.sum())


@dataclass(frozen=True, eq=False)
class DensityEstimate:
    """Kernel-density curve sampled on an even grid.

    Attributes:
        x: Grid points, ascending.
        density: Estimated density at each grid point.
        bandwidth: Kernel standard deviation actually used (after adjust).
        adjust: Multiplier applied to the rule-of-thumb bandwidth.
        n: Number of finite values the estimate is based on.
    """

    x: np.ndarray
    density: np.ndarray
    bandwidth: float
    adjust: float
    n: int


def _finite_values(values: ArrayLike, stage: str) -> np.ndarray:
    """Convert values to a float array of finite entries.

    Raises EmptyInputError when nothing is left, ValidationError when values
    are not numeric.
    """
    if isinstance(values, pd.Series):
        arr = values.to_numpy()
    else:
        # generators and sets have no shape until listed; a bare scalar becomes one value
        if not isinstance(values, np.ndarray) and np.ndim(values) == 0 and hasattr(values, "__iter__"):
            values = list(values)
        arr = np.atleast_1d(np.asarray(values))
    if arr.size == 0:
        raise EmptyInputError(stage, "no values given")
    try:
        arr = arr.astype(float).ravel()
    except (TypeError, ValueError) as exc:
        raise ValidationError(stage, f"values must be numeric: {exc}") from exc
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise EmptyInputError(stage, "no finite values given")
    return arr


def histogram_edges(bin_width: float, domain_min: float, domain_max: float) -> np.ndarray:
    """Consecutive edges from domain_min in steps of bin_width, last edge clamped to domain_max."""
    n_full = int(np.floor((domain_max - domain_min) / bin_width))
    edges = domain_min + bin_width * np.arange(n_full + 1, dtype=float)
    if domain_max - edges[-1] > 1e-9 * bin_width:
        edges = np.append(edges, domain_max)
    else:
        edges[-1] = domain_max
    return edges


def histogram(
    values: ArrayLike,
    bin_width: float,
    domain_min: float,
    domain_max: float,
) -> HistogramSummary:
    """Bin values into fixed-width bins over [domain_min, domain_max].

    Values outside the domain (and NaN) are dropped.

    Args:
        values: Numeric values (Series, array, or iterable).
        bin_width: Width of each bin, > 0.
        domain_min: Left edge of the first bin.
        domain_max: Right edge of the last bin, > domain_min.

    Returns:
        HistogramSummary with edges, counts and the number of dropped values.

    Raises:
        EmptyInputError: If values is empty.
        ValidationError: If bin_width <= 0, domain_max <= domain_min, or values
            are not numeric.
    """
    if not bin_width > 0:
        raise ValidationError("histogram", f"bin_width must be > 0, got {bin_width!r}")
    if not domain_max > domain_min:
        raise ValidationError(
            "histogram", f"domain_max ({domain_max!r}) must be greater than domain_min ({domain_min!r})"
        )
    arr = _finite_values(values, "histogram")

    edges = histogram_edges(float(bin_width), float(domain_min), float(domain_max))
    in_domain = (arr >= domain_min) & (arr <= domain_max)
    counts, _ = np.histogram(arr[in_domain], bins=edges)
    n_dropped = int(arr.size - in_domain.sum())
    if n_dropped:
        logger.debug(f"histogram dropped {n_dropped} of {arr.size} values outside [{domain_min}, {domain_max}]")

    return HistogramSummary(
        edges=_frozen(edges),
        counts=_frozen(counts.astype(np.int64)),
        bin_width=float(bin_width),
        domain_min=float(domain_min),
        domain_max=float(domain_max),
        n_dropped=n_dropped,
    )


def silverman_bandwidth(arr: np.ndarray) -> float:
    """Silverman's rule of thumb for a Gaussian kernel.

    Falls back to the standard deviation, then |x[0]|, then 1.0 when the
    spread of the data is zero.
    """
    n = arr.size
    sd = float(np.std(arr, ddof=1)) if n > 1 else 0.0
    q75, q25 = np.percentile(arr, [75, 25])
    iqr = float(q75 - q25)
    lo = min(sd, iqr / 1.34)
    if not lo > 0:
        lo = sd or abs(float(arr[0])) or 1.0
    return 0.9 * lo * n ** (-0.2)


def kernel_density(
    values: ArrayLike,
    bandwidth_adjust: float = 1.0,
    *,
    n_points: int = 512,
) -> DensityEstimate:
    """Gaussian kernel-density estimate of values.

    Args:
        values: Numeric values; NaN is dropped.
        bandwidth_adjust: Multiplier on the Silverman bandwidth, > 0.
        n_points: Number of grid points, >= 2.

    Returns:
        DensityEstimate over [min(values), max(values)]. When all values are
        equal, the grid is widened by three bandwidths on either side.

    Raises:
        EmptyInputError: If there are no finite values.
        ValidationError: If bandwidth_adjust <= 0 or n_points < 2.
    """
    if not bandwidth_adjust > 0:
        raise ValidationError("kernel_density", f"bandwidth_adjust must be > 0, got {bandwidth_adjust!r}")
    if n_points < 2:
        raise ValidationError("kernel_density", f"n_points must be >= 2, got {n_points!r}")
    arr = _finite_values(values, "kernel_density")

    bw = silverman_bandwidth(arr) * float(bandwidth_adjust)
    lo, hi = float(arr.min()), float(arr.max())
    if hi == lo:
        lo, hi = lo - 3 * bw, hi + 3 * bw
    grid = np.linspace(lo, hi, n_points)

    dens = np.zeros_like(grid)
    for i in range(0, arr.size, _KDE_CHUNK):
        chunk = arr[i:i + _KDE_CHUNK]
        z = (grid[:, None] - chunk[None, :]) / bw
        dens += np.exp(-0.5 * z * z).sum(axis=1)
    dens /= arr.size * bw * np.sqrt(2 * np.pi)

    logger.debug(f"kernel_density n={arr.size}, bw={bw:.4g}, range=[{lo:.4g}, {hi:.4g}]")
    return DensityEstimate(
        x=_frozen(grid),
        density=_frozen(dens),
        bandwidth=bw,
        adjust=float(bandwidth_adjust),
        n=int(arr.size),
    )


def describe(values: ArrayLike) -> dict[str, float]:
    """Count, min, max, mean, median, std, sem and cv of the finite values.

    std is the sample standard deviation; sem and std are 0.0 for a single
    value; cv is NaN when the mean is zero.

    Raises:
        EmptyInputError: If there are no finite values.
    """
    arr = _finite_values(values, "describe")
    n = arr.size
    mean = float(np.mean(arr))
    std = float(np.std(arr, ddof=1)) if n > 1 else 0.0
    return {
        "count": n,
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
        "mean": mean,
        "median": float(np.median(arr)),
        "std": std,
        "sem": std / np.sqrt(n) if n > 1 else 0.0,
        "cv": std / mean if mean != 0 else float("nan"),
    }


def summarize_by_period(
    long_table: pd.DataFrame,
    column: str,
    *,
    period_col: str = PERIOD_COL,
) -> pd.DataFrame:
    """describe() for each period of a long-format table.

    Returns:
        DataFrame indexed by period (category order) with STATS_COLUMNS.

    Raises:
        ValidationError: If period_col or column is missing.
        EmptyInputError: If a period has no finite values for column.
    """
    for col in (period_col, column):
        if col not in long_table.columns:
            raise ValidationError("describe", f"long table has no column {col!r}")

    rows: dict[Any, dict[str, float]] = {}
    for label, sub in iter_periods(long_table, period_col=period_col):
        rows[label] = describe(sub[column])
    out = pd.DataFrame.from_dict(rows, orient="index", columns=STATS_COLUMNS)
    out.index.name = period_col
    return out
