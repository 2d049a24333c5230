"""Column specifications: the structured description of which columns to target."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum

import numpy as np
import pandas as pd
from pandas.api import types as ptypes


class ColumnSpec:
    """Base class of all column specifications.

    Specifications compose with ``~spec`` (complement) and ``spec | other`` (union).
    """

    def __invert__(self) -> Negated:
        return Negated(self)

    def __or__(self, other: object) -> Combined:
        return Combined((self, as_column_spec(other)))

    def __ror__(self, other: object) -> Combined:
        return Combined((as_column_spec(other), self))


class PatternKind(StrEnum):
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    REGEX = "regex"


@dataclass(frozen=True)
class Explicit(ColumnSpec):
    """Literal column names; ``"a:b"`` tokens expand to the inclusive range from ``a`` to ``b``.

    Attributes:
        names: Requested column names, in requested order.
        new_names: Optional output names (same length as ``names``), used by ``data_select``.
    """

    names: tuple[object, ...]
    new_names: tuple[object, ...] | None = None


@dataclass(frozen=True)
class Pattern(ColumnSpec):
    """Name matching by prefix, suffix, substring or regular expression.

    ``ignore_case=None`` defers to the ``ignore_case`` argument of the resolving call.
    """

    kind: PatternKind
    patterns: tuple[str, ...]
    ignore_case: bool | None = None


@dataclass(frozen=True)
class Range(ColumnSpec):
    """Inclusive span between two column names (either direction)."""

    start: object
    end: object


@dataclass(frozen=True)
class Indices(ColumnSpec):
    """1-based positions; all-negative positions exclude those columns instead."""

    positions: tuple[int, ...]


@dataclass(frozen=True)
class Predicate(ColumnSpec):
    """Keep columns whose *values* satisfy ``test``."""

    test: Callable[[pd.Series], object]
    label: str | None = None


@dataclass(frozen=True)
class Negated(ColumnSpec):
    """Complement of ``inner`` within the frame's columns."""

    inner: ColumnSpec

    def __invert__(self) -> ColumnSpec:
        return self.inner


@dataclass(frozen=True)
class Combined(ColumnSpec):
    """Ordered, de-duplicated union of several specifications."""

    parts: tuple[ColumnSpec, ...]


# ------------------------------------------------------------------ select helpers
def starts_with(*patterns: str, ignore_case: bool | None = None) -> Pattern:
    """Columns whose name starts with any of ``patterns``."""
    return Pattern(PatternKind.STARTS_WITH, tuple(patterns), ignore_case)


def ends_with(*patterns: str, ignore_case: bool | None = None) -> Pattern:
    """Columns whose name ends with any of ``patterns``."""
    return Pattern(PatternKind.ENDS_WITH, tuple(patterns), ignore_case)


def contains(*patterns: str, ignore_case: bool | None = None) -> Pattern:
    """Columns whose name contains any of ``patterns`` literally."""
    return Pattern(PatternKind.CONTAINS, tuple(patterns), ignore_case)


def regex(*patterns: str, ignore_case: bool | None = None) -> Pattern:
    """Columns whose name matches any of the regular expressions (unanchored search)."""
    return Pattern(PatternKind.REGEX, tuple(patterns), ignore_case)


def col_range(start: object, end: object) -> Range:
    return Range(start, end)


def where(test: Callable[[pd.Series], object], label: str | None = None) -> Predicate:
    """Select columns by a test on their values, e.g. ``where(lambda s: s.mean() > 3.5)``."""
    return Predicate(test, label or getattr(test, "__name__", None))


def _is_numeric(values: pd.Series) -> bool:
    return ptypes.is_numeric_dtype(values.dtype) and not ptypes.is_bool_dtype(values.dtype)


def _is_factor(values: pd.Series) -> bool:
    return isinstance(values.dtype, pd.CategoricalDtype)


def _is_character(values: pd.Series) -> bool:
    return not _is_factor(values) and ptypes.is_string_dtype(values)


def _is_logical(values: pd.Series) -> bool:
    return ptypes.is_bool_dtype(values.dtype)


is_numeric = Predicate(_is_numeric, "is_numeric")
is_factor = Predicate(_is_factor, "is_factor")
is_character = Predicate(_is_character, "is_character")
is_logical = Predicate(_is_logical, "is_logical")


def _is_integer(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def as_column_spec(obj: object) -> ColumnSpec | None:
    """Convert plain Python selection values into a :class:`ColumnSpec`.

    Supported inputs:
        - ``None``: no specification (select everything / exclude nothing)
        - :class:`ColumnSpec`: returned unchanged
        - ``str``: a single column name (or ``"a:b"`` range token)
        - ``int`` / ``range`` / sequence of ints: 1-based positions
        - callable: predicate evaluated on each column's values
        - mapping ``{new_name: old_name}``: names with renaming
        - other sequences: names, or a union of mixed items

    Raises:
        TypeError: If the value cannot be interpreted as a selection.
    """
    if obj is None or isinstance(obj, ColumnSpec):
        return obj
    if isinstance(obj, str):
        return Explicit((obj,))
    if _is_integer(obj):
        return Indices((int(obj),))
    if isinstance(obj, range):
        return Indices(tuple(obj))
    if isinstance(obj, Mapping):
        return Explicit(tuple(obj.values()), new_names=tuple(obj.keys()))
    if callable(obj):
        return where(obj)
    if isinstance(obj, Iterable):
        items = list(obj)
        if items and all(_is_integer(item) for item in items):
            return Indices(tuple(int(item) for item in items))
        if all(not isinstance(item, (ColumnSpec, Mapping, range)) and not callable(item) for item in items):
            return Explicit(tuple(items))
        return Combined(tuple(as_column_spec(item) for item in items))
    raise TypeError(f"Cannot interpret `{obj!r}` as a column selection.")
