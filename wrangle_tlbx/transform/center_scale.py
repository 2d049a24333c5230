"""Center and scale computation for single vectors."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from wrangle_tlbx.data.coercion import ValueKind, as_series, to_numeric, value_kind
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics

from .weighted_stats import validate_weights, weighted_mad, weighted_mean, weighted_median, weighted_sd


@dataclass(frozen=True)
class CenteringResult:
    """Transformed vector plus the provenance needed to invert the transformation.

    Attributes:
        values: Transformed values, aligned with the input; missing where the input was missing or infinite.
        center: Subtracted center, ``None`` if the input was passed through unchanged.
        scale: Divisor (``1`` for centering), ``None`` if the input was passed through unchanged.
        robust: Whether median/MAD were used instead of mean/SD.
        two_sd: Whether values were divided by two times the scale.
    """

    values: pd.Series
    center: float | None
    scale: float | None
    robust: bool = False
    two_sd: bool = False

    @property
    def is_transformed(self) -> bool:
        return self.center is not None

    def to_numpy(self) -> np.ndarray:
        return self.values.to_numpy()


@dataclass(frozen=True)
class CenteringInputs:
    """Validated numeric inputs of a single-vector transformation.

    Attributes:
        series: Original input.
        values: Input converted to floats.
        valid: Positions that are finite (in the values and, if weighted, in the weights).
        weights: Weights at the valid positions, ``None`` when unweighted.
        reference: Finite reference values, ``None`` to use the input itself.
        single_value: The valid values hold exactly one distinct value and no center was provided.
    """

    series: pd.Series
    values: np.ndarray
    valid: np.ndarray
    weights: np.ndarray | None
    reference: np.ndarray | None
    single_value: bool

    @property
    def population(self) -> np.ndarray:
        return self.values[self.valid]


def _is_unset(value: object) -> bool:
    return value is None or (isinstance(value, float) and np.isnan(value))


def get_center_scale(
    values: np.ndarray,
    *,
    robust: bool = False,
    weights: np.ndarray | None = None,
    reference: np.ndarray | None = None,
    center: object = True,
    scale: object = None,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
    context: str | None = None,
) -> tuple[float, float]:
    """Resolve the center and scale for ``values``.

    ``True`` computes the statistic (mean/SD, or median/MAD when ``robust``) over ``reference``
    if given (unweighted) or over ``values`` (weighted by ``weights``). ``None``, NaN and ``False``
    give the neutral value (center ``0``, scale ``1``); numbers are used as they are.
    A zero or undefined scale is reset to ``1`` with a warning.

    Returns:
        ``(center, scale)``
    """
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    population, w = (values, weights) if reference is None else (reference, None)

    if _is_unset(scale) or scale is False:
        scale_value = 1.0
    elif scale is True:
        scale_value = weighted_mad(population, w) if robust else weighted_sd(population, w)
    else:
        scale_value = float(scale)

    if _is_unset(center) or center is False:
        center_value = 0.0
    elif center is True:
        center_value = weighted_median(population, w) if robust else weighted_mean(population, w)
    else:
        center_value = float(center)

    if scale_value == 0 or not np.isfinite(scale_value):
        scale_value = 1.0
        diagnostics.warning(
            f"{'MAD' if robust else 'SD'} is 0 - variable not standardized (only centered).",
            context,
        )
    return center_value, scale_value


def prepare_centering(
    x: object,
    *,
    weights: Sequence[float] | np.ndarray | None = None,
    reference: object = None,
    force: bool = False,
    center: object = True,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
    context: str | None = None,
) -> CenteringInputs | None:
    """Classify and validate a vector before centering.

    Returns ``None`` when the vector must be passed through unchanged: it is entirely missing
    or infinite, it is categorical, character, logical or a date and ``force`` is not set,
    or it is of an unsupported kind (which is also reported).
    """
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    series = as_series(x)
    kind = value_kind(series)

    if kind is ValueKind.UNSUPPORTED:
        diagnostics.info(f"Centering currently not possible for variables of class `{series.dtype}`.", context)
        return None
    if kind is not ValueKind.NUMERIC and not force:
        return None

    values = to_numeric(series).to_numpy(dtype=float)
    valid = np.isfinite(values)
    if not valid.any():
        return None

    w = None
    if weights is not None:
        w = np.asarray(weights, dtype=float)
        if w.shape != values.shape:
            raise ValueError(f"`weights` must have the same length as `x` ({w.size} != {values.size}).")
        valid &= np.isfinite(w)
        w = w[valid] if validate_weights(w[valid], diagnostics) else None

    reference_values = None
    if reference is not None:
        reference_values = to_numeric(as_series(reference)).to_numpy(dtype=float)
        reference_values = reference_values[np.isfinite(reference_values)]

    n_unique = np.unique(values[valid]).size
    single_value = n_unique == 1 and reference is None and (_is_unset(center) or center is True)
    if single_value:
        diagnostics.info("The variable contains only one unique value and will be set to 0.", context)
    elif n_unique == 2 and not kind.is_categorical_like:
        diagnostics.info(
            "The variable contains only two different values. Consider converting it to a factor.",
            context,
        )

    return CenteringInputs(
        series=series,
        values=values,
        valid=valid,
        weights=w,
        reference=reference_values,
        single_value=single_value,
    )
