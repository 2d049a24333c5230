"""Argument processing shared by the data frame forms of the transformations."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Literal

import numpy as np
import pandas as pd
from pandas.api import types as ptypes

from wrangle_tlbx.data.coercion import value_kind
from wrangle_tlbx.data.views import TransformPlan
from wrangle_tlbx.selection.selector import resolve_selection
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics

from .weighted_stats import validate_weights


logger = logging.getLogger(__name__)

NAPolicy = Literal["none", "selected", "all"]
NA_POLICIES: tuple[str, ...] = ("none", "selected", "all")


def resolve_append_suffix(append: bool | str | None, default_suffix: str) -> str | None:
    """Translate the ``append`` argument into a suffix (``None`` means transform in place).

    ``True`` selects ``default_suffix``; a non-empty string is used literally; ``False``,
    ``None`` and ``""`` disable appending.
    """
    if append is None or append is False:
        return None
    if append is True:
        return default_suffix
    if isinstance(append, str):
        return append or None
    raise TypeError(f"`append` must be a boolean or a string, got {type(append).__name__}.")


def append_columns(frame: pd.DataFrame, columns: Sequence[str], suffix: str) -> tuple[pd.DataFrame, list[str]]:
    """Add copies of ``columns`` named ``<column><suffix>``; existing copies are overwritten.

    Returns:
        The frame with the copies and the names of the new columns, aligned with ``columns``.
    """
    out = frame.copy()
    new_names = [f"{col}{suffix}" for col in columns]
    for col, new_name in zip(columns, new_names, strict=True):
        out[new_name] = frame[col].copy()
    return out, new_names


def _normalize_override(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return None if np.isnan(value) else float(value)
    raise TypeError(f"Center and scale values must be numbers or booleans, got {value!r}.")


def resolve_overrides(
    override: object,
    columns: Sequence[str],
    name: str = "center",
) -> tuple[object, ...]:
    """Expand a center or scale override into one entry per selected column.

    Args:
        override: ``None``, a scalar (broadcast), a mapping or Series (matched by column name)
            or a sequence of length 1 or ``len(columns)`` (matched by position).
        columns: Original names of the selected columns.
        name: Argument name used in error messages.

    Returns:
        Tuple with ``None`` (compute automatically), ``True``, ``False`` or a float per column.

    Raises:
        ValueError: If an unnamed sequence has neither length 1 nor the number of selected columns.
    """
    n_columns = len(columns)
    if override is None:
        return (None,) * n_columns
    if isinstance(override, pd.Series) and not isinstance(override.index, pd.RangeIndex):
        override = override.to_dict()
    if isinstance(override, Mapping):
        return tuple(_normalize_override(override.get(col)) for col in columns)
    if np.isscalar(override):
        return (_normalize_override(override),) * n_columns

    values = list(override)
    if len(values) == 1:
        return (_normalize_override(values[0]),) * n_columns
    if len(values) != n_columns:
        raise ValueError(
            f"`{name}` must be of length 1 or have the same length as the selected variables "
            f"({len(values)} != {n_columns}).",
        )
    return tuple(_normalize_override(value) for value in values)


def _row_weights(
    frame: pd.DataFrame,
    weights: object,
    diagnostics: Diagnostics,
) -> tuple[str | None, np.ndarray | None]:
    """Return ``(weight_column, weight_values)`` for the unfiltered frame."""
    if weights is None:
        return None, None
    if isinstance(weights, str):
        if weights not in frame.columns:
            diagnostics.warning(f"Could not find weighting column `{weights}`. Weighting not carried out.")
            return None, None
        weights_values = frame[weights]
        if not ptypes.is_numeric_dtype(weights_values.dtype) or ptypes.is_bool_dtype(weights_values.dtype):
            diagnostics.warning(f"Weighting column `{weights}` is not numeric. Weighting not carried out.")
            return weights, None
        return weights, weights_values.to_numpy(dtype=float, na_value=np.nan)

    values = np.asarray(weights)
    if values.ndim != 1 or values.shape[0] != len(frame):
        raise ValueError(f"`weights` must have one value per row ({values.size} != {len(frame)}).")
    if not np.issubdtype(values.dtype, np.number) or values.dtype == bool:
        diagnostics.warning("`weights` are not numeric. Weighting not carried out.")
        return None, None
    return None, values.astype(float)


def _na_mask(frame: pd.DataFrame, columns: Sequence[str], remove_na: str) -> np.ndarray:
    if remove_na not in NA_POLICIES:
        raise ValueError(f"`remove_na` must be one of {', '.join(NA_POLICIES)}, got `{remove_na}`.")
    if remove_na == "none":
        return np.zeros(len(frame), dtype=bool)
    scope = frame.loc[:, list(columns)] if remove_na == "selected" else frame
    return scope.isna().any(axis=1).to_numpy()


def prepare_transform(
    frame: pd.DataFrame,
    select: object = None,
    exclude: object = None,
    *,
    weights: object = None,
    append: bool | str | None = False,
    default_suffix: str = "_z",
    keep_factors: bool = False,
    remove_na: NAPolicy = "none",
    reference: pd.DataFrame | None = None,
    center: object = None,
    scale: object = None,
    protected: Sequence[str] = (),
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> TransformPlan:
    """Resolve everything a data frame transformation needs before touching any values.

    Args:
        frame: Input data; never modified.
        select: Column selection, see :func:`~wrangle_tlbx.selection.select_columns`.
        exclude: Columns removed from the selection.
        weights: Name of a weight column (removed from the selection) or one weight per row.
        append: ``False`` transforms in place, ``True`` appends copies with ``default_suffix``,
            a string appends copies with that suffix.
        default_suffix: Suffix used for ``append=True``.
        keep_factors: Keep categorical and character columns in the selection.
        remove_na: ``"none"``, ``"selected"`` (rows with missing values in selected columns)
            or ``"all"`` (rows with any missing value).
        reference: Frame supplying the population for center and scale; must contain every selected column.
        center: Center overrides, see :func:`resolve_overrides`.
        scale: Scale overrides, see :func:`resolve_overrides`.
        protected: Columns never transformed (e.g. grouping columns).
        ignore_case: Case-insensitive matching in ``select``/``exclude``.
        regex: Treat ``select`` as a regular expression.
        verbose: Toggle diagnostics.
        diagnostics: Optional collector.

    Returns:
        The :class:`TransformPlan` for the call.

    Raises:
        TypeError: If ``frame`` or ``reference`` are not data frames.
        ValueError: On malformed selections, weights, overrides or NA policy, or if ``reference``
            lacks selected variables.
    """
    if not isinstance(frame, pd.DataFrame):
        raise TypeError(f"Expected a pandas DataFrame, got {type(frame).__name__}.")
    if reference is not None and not isinstance(reference, pd.DataFrame):
        raise TypeError(f"`reference` must be a DataFrame for data frame input, got {type(reference).__name__}.")
    diagnostics = resolve_diagnostics(diagnostics, verbose)

    selected = resolve_selection(
        frame,
        select,
        exclude,
        ignore_case=ignore_case,
        regex=regex,
        diagnostics=diagnostics,
        report_unmatched=True,
    ).columns

    weight_column, weight_values = _row_weights(frame, weights, diagnostics)
    blocked = set(protected)
    if weight_column is not None:
        blocked.add(weight_column)
    selected = [col for col in selected if col not in blocked]

    if not keep_factors:
        selected = [col for col in selected if not value_kind(frame[col]).is_categorical_like]

    if reference is not None:
        missing = [col for col in selected if col not in reference.columns]
        if missing:
            raise ValueError("The `reference` must include all variables from `select`.")

    center_values = resolve_overrides(center, selected, "center")
    scale_values = resolve_overrides(scale, selected, "scale")

    omit = _na_mask(frame, selected, remove_na)
    working = frame.loc[~omit].copy() if omit.any() else frame.copy()
    if weight_values is not None:
        weight_values = weight_values[~omit]
        if not validate_weights(weight_values, diagnostics):
            weight_values = None

    suffix = resolve_append_suffix(append, default_suffix)
    targets = list(selected)
    if suffix is not None:
        working, targets = append_columns(working, selected, suffix)

    logger.debug("Prepared transform of %d column(s) on %d row(s).", len(targets), len(working))
    return TransformPlan(
        frame=working,
        select=targets,
        source_columns=list(selected),
        weights=weight_values,
        center=center_values,
        scale=scale_values,
        append_suffix=suffix,
    )
