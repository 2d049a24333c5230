"""Decomposition of variables into between-group and within-group components.

For a variable ``x`` and a grouping variable ``g``, the *between* component is the group
statistic (mean by default) broadcast to every row of the group and the *within* component
is ``x - between``. With several grouping variables (cross-classified designs) there is one
between component per grouping variable, and the within component subtracts all of them.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import reduce
from typing import Literal, Self

import pandas as pd

from wrangle_tlbx.data.coercion import ValueKind, to_numeric, value_kind
from wrangle_tlbx.selection.formula import Term, parse_by, parse_terms
from wrangle_tlbx.selection.selector import describe_missing
from wrangle_tlbx.utils.config import DEFAULT_CFG
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics

from .base_transformer import BaseTransformer
from .weighted_stats import distribution_mode


logger = logging.getLogger(__name__)

CenterStatistic = Literal["mean", "median", "mode", "min", "max"]
CENTER_STATISTICS: tuple[str, ...] = ("mean", "median", "mode", "min", "max")


@dataclass(frozen=True)
class DegroupResult:
    """Between/within decomposition.

    Attributes:
        data: Frame with all between columns followed by all within columns, aligned with the input rows.
        between_columns: Names of the between (group statistic) columns.
        within_columns: Names of the within (de-grouped) columns.
        center: Group statistic used ("mean", "median", "mode", "min" or "max").
        by: Grouping variables.
    """

    data: pd.DataFrame
    between_columns: list[str]
    within_columns: list[str]
    center: str
    by: tuple[str, ...]

    @property
    def between(self) -> pd.DataFrame:
        return self.data.loc[:, self.between_columns]

    @property
    def within(self) -> pd.DataFrame:
        return self.data.loc[:, self.within_columns]


def _group_statistic(center: str) -> str | Callable[[pd.Series], object]:
    if center == "mode":
        return distribution_mode
    return center


def _category_codes(values: pd.Series) -> tuple[pd.Series, list[object]]:
    """Zero-based level codes of a categorical (or character) series and its levels."""
    categorical = values if isinstance(values.dtype, pd.CategoricalDtype) else values.astype("category")
    codes = categorical.cat.codes.astype(float).where(categorical.notna())
    return codes, list(categorical.cat.categories)


def _dummy(values: pd.Series, level: object) -> pd.Series:
    return (values == level).astype(float).where(values.notna())


class Degrouper(BaseTransformer):
    """Compute between and within components of selected variables.

    Args:
        frame: Input data.
        select: Variables to decompose, as a formula (``"~ x + y*z"``) or a list of names/terms.
            Interaction terms are decomposed on the product of their parts (column ``x_y``).
        by: Grouping variable(s), as a name, list of names, or formula.
        center: Group statistic: "mean", "median", "mode", "min" or "max".
        suffix_within: Suffix of the within columns (default ``"_within"``).
        suffix_between: Suffix of the between columns (default ``"_between"``).
        add_attributes: Record the names of within and between columns in ``data.attrs``.
        verbose: Toggle diagnostics.
        diagnostics: Optional collector.

    Example:
        >>> res = Degrouper(df, ["x"], by="id").fit().result()
        >>> res.within_columns
        ['x_within']
    """

    def __init__(
        self,
        frame: pd.DataFrame,
        select: str | Iterable[str],
        by: str | Iterable[str],
        *,
        center: CenterStatistic = "mean",
        suffix_within: str | None = None,
        suffix_between: str | None = None,
        add_attributes: bool = True,
        verbose: bool = True,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        if not isinstance(frame, pd.DataFrame):
            raise TypeError(f"Expected a pandas DataFrame, got {type(frame).__name__}.")
        center = center.lower()
        if center not in CENTER_STATISTICS:
            raise ValueError(f"`center` must be one of {', '.join(CENTER_STATISTICS)}, got `{center}`.")

        self._frame = frame
        self._terms: tuple[Term, ...] = parse_terms(select)
        self._by = parse_by(by)
        self._center = center
        self._suffix_within = DEFAULT_CFG.within_suffix if suffix_within is None else suffix_within
        self._suffix_between = DEFAULT_CFG.between_suffix if suffix_between is None else suffix_between
        self._add_attributes = add_attributes
        self._diagnostics = resolve_diagnostics(diagnostics, verbose)
        self._result: DegroupResult | None = None
        self._fitted = False

    def _validate_names(self) -> None:
        wanted = [name for term in self._terms for name in term] + list(self._by)
        missing = list(dict.fromkeys(name for name in wanted if name not in self._frame.columns))
        if missing:
            raise ValueError(
                "Following variable(s) were not found in the data: "
                + describe_missing(missing, list(self._frame.columns)),
            )

    def _numeric(self, name: str) -> pd.Series:
        values = self._frame[name]
        kind = value_kind(values)
        if kind.is_categorical_like:
            return _category_codes(values)[0]
        if kind is not ValueKind.UNSUPPORTED:
            return to_numeric(values)
        raise TypeError(f"Variable `{name}` of type `{values.dtype}` cannot be de- or group-meaned.")

    def _working_frame(self) -> pd.DataFrame:
        """Numeric columns to decompose: terms in requested order, then level dummies."""
        columns: dict[str, pd.Series] = {}
        dummies: dict[str, pd.Series] = {}
        coerced: list[str] = []
        for term in self._terms:
            if len(term) > 1:
                columns["_".join(term)] = reduce(operator.mul, (self._numeric(name) for name in term))
                continue
            name = term[0]
            values = self._frame[name]
            if value_kind(values).is_categorical_like:
                codes, levels = _category_codes(values)
                columns[name] = codes
                coerced.append(name)
                if len(levels) > 2:
                    for level in levels:
                        dummies[f"{name}_{level}"] = _dummy(values, level)
            else:
                columns[name] = self._numeric(name)

        if coerced:
            self._diagnostics.info(
                f"Categorical predictors ({', '.join(coerced)}) have been coerced to numeric values "
                "to compute de- and group-meaned variables.",
            )
        columns.update({name: values for name, values in dummies.items() if name not in columns})
        return pd.DataFrame(columns, index=self._frame.index)

    def _between(self, values: pd.Series, group: str) -> pd.Series:
        grouped = values.groupby(self._frame[group], sort=False, dropna=False)
        return grouped.transform(_group_statistic(self._center)).astype(float)

    def fit(self) -> Self:
        """Compute the decomposition."""
        self._validate_names()
        working = self._working_frame()
        cross_classified = len(self._by) > 1

        between: dict[str, pd.Series] = {}
        within: dict[str, pd.Series] = {}
        for name in working.columns:
            values = working[name]
            parts = []
            for group in self._by:
                label = f"{name}{self._suffix_between}"
                if cross_classified:
                    label = f"{label}_{group}"
                between[label] = self._between(values, group)
                parts.append(between[label])
            within[f"{name}{self._suffix_within}"] = values - reduce(operator.add, parts)

        logger.debug("Decomposed %d variable(s) by %s.", len(working.columns), ", ".join(self._by))
        data = pd.concat([pd.DataFrame(between), pd.DataFrame(within)], axis=1)
        data.index = self._frame.index
        if self._add_attributes:
            data.attrs["between_effect"] = list(between)
            data.attrs["within_effect"] = list(within)

        self._result = DegroupResult(
            data=data,
            between_columns=list(between),
            within_columns=list(within),
            center=self._center,
            by=tuple(self._by),
        )
        self._fitted = True
        return self

    def result(self) -> DegroupResult:
        """Return packaged results."""
        self._require_fitted()
        return self._result  # type: ignore[return-value]


def degroup(
    frame: pd.DataFrame,
    select: str | Iterable[str],
    by: str | Iterable[str],
    *,
    center: CenterStatistic = "mean",
    suffix_within: str | None = None,
    suffix_between: str | None = None,
    add_attributes: bool = True,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.DataFrame:
    """Between/within decomposition with a selectable group statistic; see :class:`Degrouper`.

    Returns:
        Frame with the between columns followed by the within columns. Bind it to ``frame``
        with ``pd.concat([frame, out], axis=1)`` if needed.
    """
    return (
        Degrouper(
            frame,
            select,
            by,
            center=center,
            suffix_within=suffix_within,
            suffix_between=suffix_between,
            add_attributes=add_attributes,
            verbose=verbose,
            diagnostics=diagnostics,
        )
        .fit()
        .result()
        .data
    )


def demean(
    frame: pd.DataFrame,
    select: str | Iterable[str],
    by: str | Iterable[str],
    *,
    suffix_within: str | None = None,
    suffix_between: str | None = None,
    add_attributes: bool = True,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.DataFrame:
    """Group-mean centering: :func:`degroup` with ``center="mean"``.

    Example:
        >>> df = pd.DataFrame({"id": [1, 1, 2, 2], "x": [1.0, 3.0, 2.0, 6.0]})
        >>> demean(df, "x", by="id")
           x_between  x_within
        0        2.0      -1.0
        1        2.0       1.0
        2        4.0      -2.0
        3        4.0       2.0
    """
    return degroup(
        frame,
        select,
        by,
        center="mean",
        suffix_within=suffix_within,
        suffix_between=suffix_between,
        add_attributes=add_attributes,
        verbose=verbose,
        diagnostics=diagnostics,
    )
