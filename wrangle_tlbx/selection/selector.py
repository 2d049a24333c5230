"""Resolution of column specifications against a data frame's columns."""

from __future__ import annotations

import difflib
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from wrangle_tlbx.utils.config import DEFAULT_CFG
from wrangle_tlbx.utils.diagnostics import Diagnostics, resolve_diagnostics

from .specs import (
    ColumnSpec,
    Combined,
    Explicit,
    Indices,
    Negated,
    Pattern,
    PatternKind,
    Predicate,
    Range,
    as_column_spec,
)


class ColumnIndex:
    """Ordered snapshot of a frame's column names with O(1) name-to-position lookups."""

    def __init__(self, columns: Iterable[object]) -> None:
        self.names: list[object] = list(columns)
        self._positions: dict[object, int] = {}
        self._folded: dict[str, int] = {}
        for pos, name in enumerate(self.names):
            self._positions.setdefault(name, pos)
            self._folded.setdefault(str(name).casefold(), pos)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def position(self, name: object, ignore_case: bool = False) -> int | None:
        """Return the 0-based position of ``name`` or ``None`` if it is not a column."""
        if name in self._positions:
            return self._positions[name]
        if ignore_case:
            return self._folded.get(str(name).casefold())
        return None

    def lookup(self, name: object, ignore_case: bool = False) -> object | None:
        pos = self.position(name, ignore_case)
        return None if pos is None else self.names[pos]

    def span(self, start: int, end: int) -> list[object]:
        """Inclusive slice between two 0-based positions, in frame order."""
        lo, hi = sorted((start, end))
        return self.names[lo : hi + 1]

    def complement(self, selected: Iterable[object]) -> list[object]:
        chosen = set(selected)
        return [name for name in self.names if name not in chosen]


@dataclass(frozen=True)
class ColumnSelection:
    """Resolved selection.

    Attributes:
        columns: Matched column names, de-duplicated, in selection order.
        rename_map: ``{old_name: new_name}`` for names selected through a mapping.
    """

    columns: list[object]
    rename_map: dict[object, object] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.columns)


def suggest_column_names(names: Iterable[object], columns: Sequence[object]) -> dict[object, list[str]]:
    """Return close matches from ``columns`` for every name in ``names``."""
    candidates = [str(col) for col in columns]
    return {
        name: difflib.get_close_matches(
            str(name),
            candidates,
            n=DEFAULT_CFG.max_suggestions,
            cutoff=DEFAULT_CFG.suggestion_cutoff,
        )
        for name in names
    }


def describe_missing(names: Sequence[object], columns: Sequence[object]) -> str:
    """Format unresolved names plus "did you mean" hints for messages."""
    listed = ", ".join(f"`{name}`" for name in names)
    hints = sorted({hint for matches in suggest_column_names(names, columns).values() for hint in matches})
    if not hints:
        return listed
    return f"{listed}. Did you mean " + " or ".join(f"`{hint}`" for hint in hints) + "?"


def _dedupe(names: Iterable[object]) -> list[object]:
    seen: set[object] = set()
    out: list[object] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out


class _Resolver:
    """Evaluates a specification tree against one frame snapshot."""

    def __init__(
        self,
        frame: pd.DataFrame,
        ignore_case: bool,
        diagnostics: Diagnostics,
        report_unmatched: bool,
    ) -> None:
        self.frame = frame
        self.index = ColumnIndex(frame.columns)
        self.ignore_case = ignore_case
        self.diagnostics = diagnostics
        self.report_unmatched = report_unmatched
        self.renames: dict[object, object] = {}

    def resolve(self, spec: ColumnSpec) -> list[object]:
        if isinstance(spec, Explicit):
            return self._explicit(spec)
        if isinstance(spec, Pattern):
            return self._pattern(spec)
        if isinstance(spec, Range):
            return self._range(spec)
        if isinstance(spec, Indices):
            return self._indices(spec)
        if isinstance(spec, Predicate):
            return self._predicate(spec)
        if isinstance(spec, Negated):
            return self.index.complement(self.resolve(spec.inner))
        if isinstance(spec, Combined):
            return _dedupe(name for part in spec.parts for name in self.resolve(part))
        raise TypeError(f"Unsupported column specification: {spec!r}")

    def _explicit(self, spec: Explicit) -> list[object]:
        new_names = spec.new_names if spec.new_names is not None else (None,) * len(spec.names)
        found: list[object] = []
        unmatched: list[object] = []
        for name, new_name in zip(spec.names, new_names, strict=True):
            column = self.index.lookup(name, self.ignore_case)
            if column is not None:
                found.append(column)
                if new_name is not None and new_name != column:
                    self.renames[column] = new_name
                continue
            if isinstance(name, str) and ":" in name:
                start, _, end = name.partition(":")
                lo = self.index.position(start.strip(), self.ignore_case)
                hi = self.index.position(end.strip(), self.ignore_case)
                if lo is not None and hi is not None:
                    found.extend(self.index.span(lo, hi))
                    continue
            unmatched.append(name)

        if unmatched and self.report_unmatched:
            self.diagnostics.info(
                "Following variable(s) were not found: " + describe_missing(unmatched, self.index.names),
            )
        return _dedupe(found)

    def _pattern(self, spec: Pattern) -> list[object]:
        ignore_case = self.ignore_case if spec.ignore_case is None else spec.ignore_case
        flags = re.IGNORECASE if ignore_case else 0
        found: list[object] = []
        for pattern in spec.patterns:
            if spec.kind is PatternKind.STARTS_WITH:
                expr = "^" + re.escape(pattern)
            elif spec.kind is PatternKind.ENDS_WITH:
                expr = re.escape(pattern) + "$"
            elif spec.kind is PatternKind.CONTAINS:
                expr = re.escape(pattern)
            else:
                expr = pattern
            compiled = re.compile(expr, flags)
            found.extend(name for name in self.index.names if compiled.search(str(name)))
        return _dedupe(found)

    def _endpoint(self, endpoint: object) -> int | None:
        pos = self.index.position(endpoint, self.ignore_case)
        if pos is None and isinstance(endpoint, int) and 1 <= endpoint <= len(self.index):
            pos = endpoint - 1
        return pos

    def _range(self, spec: Range) -> list[object]:
        lo, hi = self._endpoint(spec.start), self._endpoint(spec.end)
        if lo is None or hi is None:
            if self.report_unmatched:
                missing = [end for end, pos in ((spec.start, lo), (spec.end, hi)) if pos is None]
                self.diagnostics.info(
                    "Range boundaries were not found: " + describe_missing(missing, self.index.names),
                )
            return []
        return self.index.span(lo, hi)

    def _indices(self, spec: Indices) -> list[object]:
        positions = spec.positions
        if any(pos == 0 for pos in positions):
            raise ValueError("Column positions are 1-based; `0` is not a valid position in `select` or `exclude`.")
        if any(pos < 0 for pos in positions) and any(pos > 0 for pos in positions):
            raise ValueError("You can't mix negative and positive numeric indices in `select` or `exclude`.")
        n_columns = len(self.index)
        if all(pos < 0 for pos in positions):
            dropped = {-pos - 1 for pos in positions}
            return [name for pos, name in enumerate(self.index.names) if pos not in dropped]
        return _dedupe(self.index.names[pos - 1] for pos in positions if pos <= n_columns)

    def _predicate(self, spec: Predicate) -> list[object]:
        found: list[object] = []
        for pos, name in enumerate(self.index.names):
            if bool(spec.test(self.frame.iloc[:, pos])):
                found.append(name)
        return found


def resolve(
    spec: object,
    frame: pd.DataFrame,
    *,
    ignore_case: bool = False,
    diagnostics: Diagnostics | None = None,
) -> list[object]:
    """Resolve a single specification (no ``exclude`` phase) against ``frame``.

    ``None`` resolves to all columns in frame order.
    """
    column_spec = as_column_spec(spec)
    if column_spec is None:
        return list(frame.columns)
    resolver = _Resolver(frame, ignore_case, resolve_diagnostics(diagnostics), report_unmatched=False)
    return resolver.resolve(column_spec)


def resolve_selection(
    frame: pd.DataFrame,
    select: object = None,
    exclude: object = None,
    *,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
    report_unmatched: bool = False,
) -> ColumnSelection:
    """Resolve ``select`` minus ``exclude`` into a :class:`ColumnSelection`.

    Args:
        frame: Data frame whose columns are searched.
        select: Selection (see :func:`~wrangle_tlbx.selection.specs.as_column_spec`); ``None`` selects all.
        exclude: Selection of columns to remove from the result; ``None`` excludes nothing.
        ignore_case: Case-insensitive matching of literal names and patterns.
        regex: Treat ``select`` (which must be a single string) as a regular expression.
        verbose: Toggle diagnostics.
        diagnostics: Optional collector receiving the diagnostics.
        report_unmatched: Also report literal names and range boundaries that matched nothing.

    Raises:
        TypeError: If ``frame`` is not a data frame or a selection cannot be interpreted.
        ValueError: If indices are malformed or ``regex=True`` is combined with a non-string ``select``.
    """
    if not isinstance(frame, pd.DataFrame):
        raise TypeError(f"Expected a pandas DataFrame, got {type(frame).__name__}.")
    diagnostics = resolve_diagnostics(diagnostics, verbose)

    if regex:
        if not isinstance(select, str):
            raise ValueError("When `regex=True`, `select` must be a single character string.")
        select_spec: ColumnSpec | None = Pattern(PatternKind.REGEX, (select,))
    else:
        select_spec = as_column_spec(select)

    resolver = _Resolver(frame, ignore_case, diagnostics, report_unmatched)
    columns = list(frame.columns) if select_spec is None else resolver.resolve(select_spec)

    exclude_spec = as_column_spec(exclude)
    if exclude_spec is not None:
        excluded = set(resolver.resolve(exclude_spec))
        columns = [name for name in columns if name not in excluded]

    if not columns:
        diagnostics.warning("No column names that matched the required search pattern were found.")

    rename_map = {old: new for old, new in resolver.renames.items() if old in columns}
    return ColumnSelection(columns=columns, rename_map=rename_map)


def select_columns(
    frame: pd.DataFrame,
    select: object = None,
    exclude: object = None,
    *,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> list[object]:
    """Return the column names of ``frame`` matched by ``select`` and not by ``exclude``.

    Example:
        >>> from wrangle_tlbx.selection import contains, select_columns, starts_with
        >>> select_columns(iris, starts_with("Sepal"))
        ['Sepal.Length', 'Sepal.Width']
        >>> select_columns(iris, starts_with("Sepal"), exclude=contains("Width"))
        ['Sepal.Length']
        >>> select_columns(iris, ["Petal.Width", "Sepal.Length", "Test"])
        ['Petal.Width', 'Sepal.Length']
    """
    return resolve_selection(
        frame,
        select,
        exclude,
        ignore_case=ignore_case,
        regex=regex,
        verbose=verbose,
        diagnostics=diagnostics,
    ).columns


def data_select(
    frame: pd.DataFrame,
    select: object = None,
    exclude: object = None,
    *,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.DataFrame:
    """Return the matched columns as a new frame; mapping selections rename the output columns."""
    selection = resolve_selection(
        frame,
        select,
        exclude,
        ignore_case=ignore_case,
        regex=regex,
        verbose=verbose,
        diagnostics=diagnostics,
    )
    return frame.loc[:, selection.columns].rename(columns=selection.rename_map)


EXTRACT_MODES: tuple[str, ...] = ("all", "first", "last", "odd", "even")


def _element_labels(frame: pd.DataFrame, name: object) -> object:
    """Translate ``name`` of :func:`data_extract` into a column name, an index or a label sequence."""
    if name is None:
        return None
    if isinstance(name, str):
        return frame.index if name == "row.names" else name
    if isinstance(name, (int, np.integer)) and not isinstance(name, (bool, np.bool_)):
        if name == 0:
            return frame.index
        n_columns = frame.shape[1]
        pos = n_columns + int(name) if name < 0 else int(name) - 1
        if not 0 <= pos < n_columns:
            raise ValueError(f"`name` refers to column position {name}, but the data has {n_columns} columns.")
        return frame.columns[pos]
    return list(name)


def data_extract(
    frame: pd.DataFrame,
    select: object,
    *,
    name: object = None,
    extract: str = "all",
    as_data_frame: bool = False,
    ignore_case: bool = False,
    regex: bool = False,
    verbose: bool = True,
    diagnostics: Diagnostics | None = None,
) -> pd.Series | pd.DataFrame | None:
    """Pull one or more columns out of ``frame``.

    Args:
        frame: Data frame to extract from.
        select: Selection, see :func:`select_columns`.
        name: Labels for the elements of an extracted single column: a column name or 1-based
            position (negative counts from the right), ``0`` or ``"row.names"`` for the frame's index,
            or a sequence with one label per row.
        extract: Which of several matched columns to keep: "all", "first", "last", "odd" or "even".
        as_data_frame: Always return a frame, even for a single column.
        ignore_case: Case-insensitive matching.
        regex: Treat ``select`` as a regular expression.
        verbose: Toggle diagnostics.
        diagnostics: Optional collector.

    Returns:
        ``None`` if nothing matched, a Series for a single column (unless ``as_data_frame``),
        otherwise a frame.

    Example:
        >>> data_extract(iris, "Species", name=0).index.equals(iris.index)
        True
        >>> data_extract(iris, starts_with("Sepal"), extract="last").name
        'Sepal.Width'
    """
    mode = extract.lower()
    if mode not in EXTRACT_MODES:
        raise ValueError(f"`extract` must be one of {', '.join(EXTRACT_MODES)}, got `{extract}`.")
    columns = resolve_selection(
        frame,
        select,
        ignore_case=ignore_case,
        regex=regex,
        verbose=verbose,
        diagnostics=diagnostics,
    ).columns
    if mode == "first":
        columns = columns[:1]
    elif mode == "last":
        columns = columns[-1:]
    elif mode == "odd":
        columns = columns[0::2]
    elif mode == "even":
        columns = columns[1::2]
    if not columns:
        return None

    if as_data_frame or len(columns) > 1:
        return frame.loc[:, columns]

    values = frame[columns[0]]
    labels = _element_labels(frame, name)
    if labels is None:
        return values
    if not isinstance(labels, (pd.Index, list)):
        if labels not in frame.columns:
            raise ValueError("`name` was not found in the data: " + describe_missing([labels], list(frame.columns)))
        labels = frame[labels].to_numpy()
    if len(labels) != len(values):
        return values
    return values.set_axis(labels)
