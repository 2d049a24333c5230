"""Centering and standardization of vectors and data frames.

Vector input returns a :class:`~wrangle_tlbx.transform.center_scale.CenteringResult`; data frame input
returns a :class:`TransformResult` with the transformed frame and the per-column centers and scales.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from wrangle_tlbx.data.coercion import ValueKind, as_series, value_kind
from wrangle_tlbx.selection.formula import parse_by
from wrangle_tlbx.selection.selector import describe_missing, select_columns
from wrangle_tlbx.utils.config import DEFAULT_CFG
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics

from .arguments import NAPolicy, prepare_transform, resolve_overrides
from .center_scale import CenteringResult, get_center_scale, prepare_centering


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformResult:
    """Transformed data frame plus provenance.

    Attributes:
        data: Frame with the transformed (or appended) columns.
        center: Center per transformed column; a frame indexed by group key for grouped calls.
        scale: Scale per transformed column, shaped like ``center``.
        robust: Whether median/MAD were used.
        two_sd: Whether values were divided by two times the scale.
        by: Grouping columns, ``None`` for ungrouped calls.
    """

    data: pd.DataFrame
    center: pd.Series | pd.DataFrame
    scale: pd.Series | pd.DataFrame
    robust: bool = False
    two_sd: bool = False
    by: tuple[str, ...] | None = None

    @property
    def columns(self) -> list[str]:
        """Names of the transformed columns."""
        return list(self.center.columns if isinstance(self.center, pd.DataFrame) else self.center.index)


def _is_unset(value: object) -> bool:
    return value is None or (isinstance(value, float) and np.isnan(value))


def _transform_vector(
    x: object,
    *,
    scaled: bool,
    robust: bool,
    two_sd: bool,
    weights: object,
    reference: object,
    center_override: object,
    scale_override: object,
    force: bool,
    diagnostics: Diagnostics,
    context: str | None = None,
) -> CenteringResult:
    series = as_series(x)
    if isinstance(weights, str):
        raise TypeError("`weights` given by column name require data frame input.")
    center_override = True if _is_unset(center_override) else center_override
    if scaled:
        scale_override = True if _is_unset(scale_override) else scale_override
    else:
        scale_override = None
    two_sd = two_sd and scaled

    inputs = prepare_centering(
        series,
        weights=weights,
        reference=reference,
        force=force,
        center=center_override,
        diagnostics=diagnostics,
        context=context,
    )
    if inputs is None:
        return CenteringResult(values=series, center=None, scale=None, robust=robust, two_sd=two_sd)

    center_value, scale_value = get_center_scale(
        inputs.population,
        robust=robust,
        weights=inputs.weights,
        reference=inputs.reference,
        center=center_override,
        scale=scale_override,
        diagnostics=diagnostics,
        context=context,
    )

    out = np.full(len(series), np.nan)
    if inputs.single_value:
        out[inputs.valid] = 0.0
    else:
        divisor = 2 * scale_value if two_sd else scale_value
        out[inputs.valid] = (inputs.population - center_value) / divisor
    values = pd.Series(out, index=series.index, name=series.name)
    return CenteringResult(values=values, center=center_value, scale=scale_value, robust=robust, two_sd=two_sd)


def _is_transformable(column: pd.Series, force: bool, diagnostics: Diagnostics, context: str) -> bool:
    kind = value_kind(column)
    if kind is ValueKind.UNSUPPORTED:
        diagnostics.info(f"Centering currently not possible for variables of class `{column.dtype}`.", context)
        return False
    return kind is ValueKind.NUMERIC or force


def _group_columns(frame: pd.DataFrame, by: str | Sequence[str]) -> list[str]:
    group_cols = parse_by(by)
    missing = [col for col in group_cols if col not in frame.columns]
    if missing:
        raise ValueError("Grouping variable(s) not found in data: " + describe_missing(missing, list(frame.columns)))
    return group_cols


def _group_index(keys: list[tuple], group_cols: list[str]) -> pd.Index:
    if len(group_cols) == 1:
        return pd.Index([key[0] for key in keys], name=group_cols[0])
    return pd.MultiIndex.from_tuples(keys, names=group_cols)


def _transform_frame(
    frame: pd.DataFrame,
    select: object,
    exclude: object,
    *,
    scaled: bool,
    robust: bool,
    two_sd: bool,
    weights: object,
    reference: pd.DataFrame | None,
    center_override: object,
    scale_override: object,
    force: bool,
    remove_na: NAPolicy,
    append: bool | str | None,
    ignore_case: bool,
    regex: bool,
    diagnostics: Diagnostics,
) -> TransformResult:
    plan = prepare_transform(
        frame,
        select,
        exclude,
        weights=weights,
        append=append,
        default_suffix=DEFAULT_CFG.standardize_suffix if scaled else DEFAULT_CFG.center_suffix,
        keep_factors=force,
        remove_na=remove_na,
        reference=reference,
        center=center_override,
        scale=scale_override if scaled else None,
        ignore_case=ignore_case,
        regex=regex,
        diagnostics=diagnostics,
    )
    out = plan.frame
    centers: dict[str, float] = {}
    scales: dict[str, float] = {}
    for target, source, center_value, scale_value in plan.items():
        result = _transform_vector(
            out[target],
            scaled=scaled,
            robust=robust,
            two_sd=two_sd,
            weights=plan.weights,
            reference=None if reference is None else reference[source],
            center_override=center_value,
            scale_override=scale_value,
            force=force,
            diagnostics=diagnostics,
            context=source,
        )
        if not result.is_transformed:
            continue
        out[target] = result.values
        centers[target] = result.center
        scales[target] = result.scale

    logger.debug("Transformed %d of %d selected column(s).", len(centers), len(plan.select))
    return TransformResult(
        data=out,
        center=pd.Series(centers, dtype=float),
        scale=pd.Series(scales, dtype=float),
        robust=robust,
        two_sd=two_sd and scaled,
    )


def _transform_grouped(
    frame: pd.DataFrame,
    select: object,
    exclude: object,
    *,
    by: str | Sequence[str],
    scaled: bool,
    robust: bool,
    two_sd: bool,
    weights: object,
    reference: pd.DataFrame | None,
    center_override: object,
    scale_override: object,
    force: bool,
    remove_na: NAPolicy,
    append: bool | str | None,
    ignore_case: bool,
    regex: bool,
    diagnostics: Diagnostics,
) -> TransformResult:
    if reference is not None:
        raise ValueError("The `reference` argument cannot be used with grouped data.")
    if weights is not None and not isinstance(weights, str):
        raise ValueError("For grouped data, `weights` must be the name of a weighting column.")
    group_cols = _group_columns(frame, by)

    plan = prepare_transform(
        frame,
        select,
        exclude,
        weights=weights,
        append=append,
        default_suffix=DEFAULT_CFG.standardize_suffix if scaled else DEFAULT_CFG.center_suffix,
        keep_factors=force,
        remove_na=remove_na,
        center=center_override,
        scale=scale_override if scaled else None,
        protected=group_cols,
        ignore_case=ignore_case,
        regex=regex,
        diagnostics=diagnostics,
    )
    out = plan.frame
    groups = out.groupby(group_cols, sort=True, dropna=False).indices
    keys = [key if isinstance(key, tuple) else (key,) for key in groups]
    positions = list(groups.values())

    centers: dict[str, list[float]] = {}
    scales: dict[str, list[float]] = {}
    for target, source, center_value, scale_value in plan.items():
        column = out[target]
        if not _is_transformable(column, force, diagnostics, source):
            continue
        transformed = np.full(len(out), np.nan)
        centers[target], scales[target] = [], []
        for pos in positions:
            result = _transform_vector(
                column.iloc[pos],
                scaled=scaled,
                robust=robust,
                two_sd=two_sd,
                weights=None if plan.weights is None else plan.weights[pos],
                reference=None,
                center_override=center_value,
                scale_override=scale_value,
                force=force,
                diagnostics=diagnostics,
                context=source,
            )
            if result.is_transformed:
                transformed[pos] = result.values.to_numpy(dtype=float)
            centers[target].append(np.nan if result.center is None else result.center)
            scales[target].append(np.nan if result.scale is None else result.scale)
        out[target] = transformed

    index = _group_index(keys, group_cols)
    return TransformResult(
        data=out,
        center=pd.DataFrame(centers, index=index, dtype=float),
        scale=pd.DataFrame(scales, index=index, dtype=float),
        robust=robust,
        two_sd=two_sd and scaled,
        by=tuple(group_cols),
    )


def _dispatch(
    x: object,
    select: object,
    exclude: object,
    *,
    scaled: bool,
    by: str | Sequence[str] | None,
    verbose: bool,
    diagnostics: Diagnostics | None,
    **kwargs: object,
) -> CenteringResult | TransformResult:
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    if isinstance(x, Mapping):
        raise TypeError("Expected a vector or a pandas DataFrame, got a mapping. Wrap it in `pd.DataFrame(...)` first.")
    if isinstance(x, pd.DataFrame):
        if by is not None:
            return _transform_grouped(x, select, exclude, by=by, scaled=scaled, diagnostics=diagnostics, **kwargs)
        return _transform_frame(x, select, exclude, scaled=scaled, diagnostics=diagnostics, **kwargs)
    if by is not None:
        raise TypeError("`by` requires data frame input.")
    return _transform_vector(
        x,
        scaled=scaled,
        robust=kwargs["robust"],
        two_sd=kwargs["two_sd"],
        weights=kwargs["weights"],
        reference=kwargs["reference"],
        center_override=kwargs["center_override"],
        scale_override=kwargs["scale_override"],
        force=kwargs["force"],
        diagnostics=diagnostics,
    )


def center(
    x: object,
    select: object = None,
    exclude: object = None,
    *,
    robust: bool = False,
    weights: object = None,
    reference: object = None,
    center_override: object = None,
    force: bool = False,
    remove_na: NAPolicy = "none",
    append: bool | str | None = False,
    by: str | Sequence[str] | None = None,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> CenteringResult | TransformResult:
    """Subtract the mean (or median, if ``robust``) from a vector or from selected data frame columns.

    Args:
        x: Vector (list, array, Series) or DataFrame.
        select: Columns to center (data frames only); all by default.
        exclude: Columns to leave untouched.
        robust: Center on the median instead of the mean.
        weights: One weight per element/row, or the name of a weight column.
        reference: Vector or frame whose values supply the center.
        center_override: Literal centers (scalar, sequence, or mapping by column name).
        force: Also center categorical, character, logical and date values (coerced to numbers).
        remove_na: Row filtering before centering (``"none"``, ``"selected"``, ``"all"``).
        append: ``True`` or a suffix to add centered copies instead of overwriting.
        by: Grouping column(s); every group is centered on its own statistic.
        ignore_case: Case-insensitive column matching.
        regex: Treat ``select`` as a regular expression.
        verbose: Toggle diagnostics.
        diagnostics: Optional collector receiving the diagnostics.

    Returns:
        :class:`CenteringResult` for vectors, :class:`TransformResult` for data frames.

    Example:
        >>> center([1, 2, 3, 4]).values.tolist()
        [-1.5, -0.5, 0.5, 1.5]
    """
    frame_kwargs = (
        {"remove_na": remove_na, "append": append, "ignore_case": ignore_case, "regex": regex}
        if isinstance(x, pd.DataFrame)
        else {}
    )
    return _dispatch(
        x,
        select,
        exclude,
        scaled=False,
        by=by,
        verbose=verbose,
        diagnostics=diagnostics,
        robust=robust,
        two_sd=False,
        weights=weights,
        reference=reference,
        center_override=center_override,
        scale_override=None,
        force=force,
        **frame_kwargs,
    )


def standardize(
    x: object,
    select: object = None,
    exclude: object = None,
    *,
    robust: bool = False,
    two_sd: bool = False,
    weights: object = None,
    reference: object = None,
    center_override: object = None,
    scale_override: object = None,
    force: bool = False,
    remove_na: NAPolicy = "none",
    append: bool | str | None = False,
    by: str | Sequence[str] | None = None,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> CenteringResult | TransformResult:
    """Center and divide by the SD (or the MAD, if ``robust``).

    Takes the same arguments as :func:`center`, plus:

    Args:
        two_sd: Divide by two times the SD/MAD, making coefficients comparable to binary predictors.
        scale_override: Literal scales (scalar, sequence, or mapping by column name).

    Example:
        >>> d = pd.DataFrame({"a": [-2, -1, 0, 1, 2], "b": [3, 4, 5, 6, 7]})
        >>> res = standardize(d)
        >>> res.center.tolist(), res.scale.round(6).tolist()
        ([0.0, 5.0], [1.581139, 1.581139])
    """
    frame_kwargs = (
        {"remove_na": remove_na, "append": append, "ignore_case": ignore_case, "regex": regex}
        if isinstance(x, pd.DataFrame)
        else {}
    )
    return _dispatch(
        x,
        select,
        exclude,
        scaled=True,
        by=by,
        verbose=verbose,
        diagnostics=diagnostics,
        robust=robust,
        two_sd=two_sd,
        weights=weights,
        reference=reference,
        center_override=center_override,
        scale_override=scale_override,
        force=force,
        **frame_kwargs,
    )


def _invert(values: pd.Series, center_value: float, scale_value: float, two_sd: bool) -> pd.Series:
    factor = 2 * scale_value if two_sd else scale_value
    return values.astype(float) * factor + center_value


def unstandardize(
    x: object,
    select: object = None,
    exclude: object = None,
    *,
    center_override: object = None,
    scale_override: object = None,
    reference: object = None,
    robust: bool = False,
    two_sd: bool = False,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.Series | pd.DataFrame:
    """Reverse :func:`center` or :func:`standardize`: ``x * scale (* 2 if two_sd) + center``.

    ``x`` may be a :class:`CenteringResult` or :class:`TransformResult` (their provenance is used),
    or raw values together with ``center_override``/``scale_override`` or a ``reference``.

    Raises:
        ValueError: If no provenance is available, or for grouped results.
    """
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    if isinstance(x, CenteringResult):
        if not x.is_transformed:
            return x.values
        return _invert(x.values, x.center, x.scale, x.two_sd)

    if isinstance(x, TransformResult):
        if x.by is not None:
            raise ValueError("Results of grouped transformations cannot be unstandardized.")
        out = x.data.copy()
        for col in x.center.index:
            out[col] = _invert(out[col], x.center[col], x.scale[col], x.two_sd)
        return out

    if isinstance(x, pd.DataFrame):
        columns = select_columns(
            x,
            select,
            exclude,
            ignore_case=ignore_case,
            regex=regex,
            diagnostics=diagnostics,
        )
        columns = [col for col in columns if value_kind(x[col]) is ValueKind.NUMERIC]
        if reference is not None:
            if not isinstance(reference, pd.DataFrame):
                raise TypeError("`reference` must be a DataFrame for data frame input.")
            missing = [col for col in columns if col not in reference.columns]
            if missing:
                raise ValueError("The `reference` must include all variables from `select`.")
            pairs = [
                get_center_scale(
                    reference[col].to_numpy(dtype=float, na_value=np.nan),
                    robust=robust,
                    center=True,
                    scale=True,
                    diagnostics=diagnostics,
                    context=col,
                )
                for col in columns
            ]
        elif center_override is None or scale_override is None:
            raise ValueError("You must provide the arguments `center_override` and `scale_override`, or `reference`.")
        else:
            centers = resolve_overrides(center_override, columns, "center")
            scales = resolve_overrides(scale_override, columns, "scale")
            pairs = list(zip(centers, scales, strict=True))
        out = x.copy()
        for col, (center_value, scale_value) in zip(columns, pairs, strict=True):
            if _is_unset(center_value) or _is_unset(scale_value):
                continue
            out[col] = _invert(out[col], float(center_value), float(scale_value), two_sd)
        return out

    series = as_series(x)
    if reference is not None:
        reference_values = as_series(reference).to_numpy(dtype=float, na_value=np.nan)
        center_value, scale_value = get_center_scale(
            reference_values[np.isfinite(reference_values)],
            robust=robust,
            center=True,
            scale=True,
            diagnostics=diagnostics,
        )
    elif center_override is None or scale_override is None:
        raise ValueError("You must provide the arguments `center_override` and `scale_override`, or `reference`.")
    else:
        center_value, scale_value = float(center_override), float(scale_override)
    return _invert(series, center_value, scale_value, two_sd)
