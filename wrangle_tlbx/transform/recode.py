"""Small recoding helpers: shifting, conversion to categoricals and recoding values to missing."""

from __future__ import annotations

import numpy as np
import pandas as pd

from wrangle_tlbx.data.coercion import ValueKind, as_series, value_kind
from wrangle_tlbx.selection.selector import select_columns
from wrangle_tlbx.utils.config import DEFAULT_CFG
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics

from .arguments import prepare_transform


def _slide_vector(x: pd.Series, lowest: float, diagnostics: Diagnostics, context: str | None = None) -> pd.Series:
    if value_kind(x) is not ValueKind.NUMERIC:
        diagnostics.info(
            "Shifting non-numeric variables is not possible. Convert them to numbers and specify `lowest`.",
            context,
        )
        return x
    return x - (x.min(skipna=True) - lowest)


def slide(
    x: object,
    select: object = None,
    exclude: object = None,
    *,
    lowest: float = 0,
    append: bool | str | None = False,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.Series | pd.DataFrame:
    """Shift numeric values so that their minimum equals ``lowest``.

    Example:
        >>> slide([5, 7, 9], lowest=1).tolist()
        [1, 3, 5]
    """
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    if not isinstance(x, pd.DataFrame):
        return _slide_vector(as_series(x), lowest, diagnostics)

    plan = prepare_transform(
        x,
        select,
        exclude,
        append=append,
        default_suffix=DEFAULT_CFG.slide_suffix,
        ignore_case=ignore_case,
        regex=regex,
        diagnostics=diagnostics,
    )
    out = plan.frame
    for target, source in zip(plan.select, plan.source_columns, strict=True):
        out[target] = _slide_vector(out[target], lowest, diagnostics, source)
    return out


def _factor_vector(x: pd.Series, diagnostics: Diagnostics, context: str | None = None) -> pd.Series:
    kind = value_kind(x)
    if kind is ValueKind.CATEGORICAL:
        return x
    if kind is ValueKind.UNSUPPORTED:
        diagnostics.info(
            f"Converting into factors values currently not possible for variables of class `{x.dtype}`.",
            context,
        )
        return x
    return x.astype("category")


def to_factor(
    x: object,
    select: object = None,
    exclude: object = None,
    *,
    append: bool | str | None = False,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.Series | pd.DataFrame:
    """Convert values to categoricals with sorted levels.

    With ``append``, columns that already are categorical are not copied.
    """
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    if not isinstance(x, pd.DataFrame):
        return _factor_vector(as_series(x), diagnostics)
    if all(value_kind(x[col]) is ValueKind.CATEGORICAL for col in x.columns):
        return x.copy()

    columns = select_columns(x, select, exclude, ignore_case=ignore_case, regex=regex, diagnostics=diagnostics)
    if append:
        columns = [col for col in columns if value_kind(x[col]) is not ValueKind.CATEGORICAL]

    plan = prepare_transform(
        x,
        columns,
        append=append,
        default_suffix=DEFAULT_CFG.factor_suffix,
        keep_factors=True,
        diagnostics=diagnostics,
    )
    out = plan.frame
    for target, source in zip(plan.select, plan.source_columns, strict=True):
        out[target] = _factor_vector(out[target], diagnostics, source)
    return out


def _split_na(na: object) -> tuple[list[float], list[str]]:
    values = [na] if np.isscalar(na) or na is None else list(na)
    numbers = [
        float(value)
        for value in values
        if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, (bool, np.bool_))
    ]
    strings = [value for value in values if isinstance(value, str)]
    return numbers, strings


def _convert_vector(
    x: pd.Series,
    na: object,
    drop_levels: bool,
    diagnostics: Diagnostics,
    context: str | None = None,
) -> pd.Series:
    numbers, strings = _split_na(na)
    kind = value_kind(x)
    if kind is ValueKind.NUMERIC:
        if not numbers:
            diagnostics.warning("`na` needs to be a numeric vector.", context)
            return x
        return x.mask(x.isin(numbers))
    if kind.is_categorical_like:
        if not strings:
            diagnostics.warning("`na` needs to be a character vector.", context)
            return x
        out = x.mask(x.isin(strings))
        if drop_levels and kind is ValueKind.CATEGORICAL:
            out = out.cat.remove_unused_categories()
        return out
    diagnostics.info(
        f"Converting values to missing currently not possible for variables of class `{x.dtype}`.",
        context,
    )
    return x


def convert_to_na(
    x: object,
    na: object = None,
    select: object = None,
    exclude: object = None,
    *,
    drop_levels: bool = False,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.Series | pd.DataFrame:
    """Replace the values listed in ``na`` by missing values.

    Numbers in ``na`` apply to numeric vectors, strings to categorical and character vectors;
    a mixed list applies each part to the matching columns of a data frame.

    Args:
        x: Vector or DataFrame.
        na: Value or list of values to treat as missing.
        select: Columns to recode (data frames only); all by default.
        exclude: Columns to leave untouched.
        drop_levels: Remove categories that no longer occur.
        ignore_case: Case-insensitive column matching.
        regex: Treat ``select`` as a regular expression.
        verbose: Toggle diagnostics.
        diagnostics: Optional collector.

    Example:
        >>> convert_to_na([1, 2, -99, 3], na=-99).tolist()
        [1.0, 2.0, nan, 3.0]
    """
    diagnostics = resolve_diagnostics(diagnostics, verbose)
    if not isinstance(x, pd.DataFrame):
        return _convert_vector(as_series(x), na, drop_levels, diagnostics)

    columns = select_columns(x, select, exclude, ignore_case=ignore_case, regex=regex, diagnostics=diagnostics)
    out = x.copy()
    # per-column kind mismatches are expected when mapping over a whole frame
    quiet = Diagnostics(verbose=False)
    for col in columns:
        out[col] = _convert_vector(out[col], na, drop_levels, quiet, str(col))
    return out
