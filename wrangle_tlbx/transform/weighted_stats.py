"""(Weighted) location and spread statistics used by centering and standardization.

All statistics ignore missing and infinite values. ``weights`` must be strictly positive;
otherwise weighting is skipped with a warning and the unweighted statistic is returned.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
from scipy.stats import median_abs_deviation
from statsmodels.stats.weightstats import DescrStatsW

from wrangle_tlbx.utils.config import DEFAULT_CFG
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics


ArrayLike = Sequence[float] | np.ndarray | pd.Series

NEGATIVE_WEIGHTS_MSG = "Some `weights` were negative or zero. Weighting not carried out."


def validate_weights(weights: ArrayLike | None, diagnostics: Diagnostics | None = None) -> bool:
    """Return True if ``weights`` are usable, warning when they are rejected."""
    if weights is None:
        return False
    w = np.asarray(weights, dtype=float)
    w = w[np.isfinite(w)]
    if w.size and np.all(w > 0):
        return True
    resolve_diagnostics(diagnostics).warning(NEGATIVE_WEIGHTS_MSG)
    return False


def finite_pairs(x: ArrayLike, weights: ArrayLike | None = None) -> tuple[np.ndarray, np.ndarray | None]:
    """Drop positions where ``x`` (or the matching weight) is missing or infinite."""
    values = np.asarray(x, dtype=float)
    mask = np.isfinite(values)
    if weights is None:
        return values[mask], None
    w = np.asarray(weights, dtype=float)
    if w.shape != values.shape:
        raise ValueError(f"`weights` must have the same length as `x` ({w.size} != {values.size}).")
    mask &= np.isfinite(w)
    return values[mask], w[mask]


def _prepare(
    x: ArrayLike,
    weights: ArrayLike | None,
    verbose: bool,
    diagnostics: Diagnostics | None,
) -> tuple[np.ndarray, np.ndarray | None]:
    values, w = finite_pairs(x, weights)
    if w is not None and not validate_weights(w, resolve_diagnostics(diagnostics, verbose)):
        w = None
    return values, w


def weighted_mean(
    x: ArrayLike,
    weights: ArrayLike | None = None,
    *,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> float:
    """Arithmetic mean, weighted by ``weights`` when given.

    Example:
        >>> weighted_mean([1, 2, 3], weights=[1, 1, 1])
        2.0
    """
    values, w = _prepare(x, weights, verbose, diagnostics)
    if not values.size:
        return np.nan
    if w is None:
        return float(np.mean(values))
    return float(DescrStatsW(values, weights=w).mean)


def weighted_median(
    x: ArrayLike,
    weights: ArrayLike | None = None,
    *,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> float:
    """Median; the weighted version is the first value whose cumulative weight reaches one half.

    When the cumulative weight hits exactly one half, the average of that value and the next is used.
    """
    values, w = _prepare(x, weights, verbose, diagnostics)
    if not values.size:
        return np.nan
    if w is None:
        return float(np.median(values))

    order = np.argsort(values, kind="stable")
    values, w = values[order], w[order]
    cumulative = np.cumsum(w) / np.sum(w)
    idx = int(np.argmax(cumulative >= 0.5))
    if np.isclose(cumulative[idx], 0.5) and idx + 1 < values.size:
        return float((values[idx] + values[idx + 1]) / 2)
    return float(values[idx])


def weighted_sd(
    x: ArrayLike,
    weights: ArrayLike | None = None,
    *,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> float:
    """Sample standard deviation (``ddof=1``); weighted with the unbiased reliability-weight correction."""
    values, w = _prepare(x, weights, verbose, diagnostics)
    if values.size < 2:
        return np.nan
    if w is None:
        return float(np.std(values, ddof=1))

    w1 = w / np.sum(w)
    centre = np.sum(w1 * values)
    denominator = 1 - np.sum(w1**2)
    if denominator <= 0:
        return np.nan
    return float(np.sqrt(np.sum(w1 * (values - centre) ** 2) / denominator))


def weighted_mad(
    x: ArrayLike,
    weights: ArrayLike | None = None,
    *,
    constant: float | None = None,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> float:
    """Median absolute deviation around the (weighted) median, scaled by ``constant`` (default 1.4826)."""
    constant = DEFAULT_CFG.mad_constant if constant is None else constant
    values, w = _prepare(x, weights, verbose, diagnostics)
    if not values.size:
        return np.nan
    if w is None:
        return float(median_abs_deviation(values, scale=1 / constant))
    med = weighted_median(values, w)
    return float(constant * weighted_median(np.abs(values - med), w))


def distribution_mode(x: ArrayLike) -> object:
    """Most frequent non-missing value; ties go to the value seen first.

    Example:
        >>> distribution_mode([3, 1, 1, 3, 2])
        3
    """
    values = pd.Series(x).dropna()
    if values.empty:
        return np.nan
    counts = values.value_counts(sort=False)
    top = counts.max()
    for value in values.unique():
        if counts[value] == top:
            return value
    return np.nan
