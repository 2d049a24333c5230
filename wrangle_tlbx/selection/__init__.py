"""Column selection: specifications, resolution against frames and the formula front-end."""

from .formula import parse_by, parse_formula, parse_terms
from .selector import (
    ColumnIndex,
    ColumnSelection,
    data_extract,
    data_select,
    describe_missing,
    resolve,
    resolve_selection,
    select_columns,
    suggest_column_names,
)
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
    col_range,
    contains,
    ends_with,
    is_character,
    is_factor,
    is_logical,
    is_numeric,
    regex,
    starts_with,
    where,
)


__all__ = [
    "ColumnIndex",
    "ColumnSelection",
    "ColumnSpec",
    "Combined",
    "Explicit",
    "Indices",
    "Negated",
    "Pattern",
    "PatternKind",
    "Predicate",
    "Range",
    "as_column_spec",
    "col_range",
    "contains",
    "data_extract",
    "data_select",
    "describe_missing",
    "ends_with",
    "is_character",
    "is_factor",
    "is_logical",
    "is_numeric",
    "parse_by",
    "parse_formula",
    "parse_terms",
    "regex",
    "resolve",
    "resolve_selection",
    "select_columns",
    "starts_with",
    "suggest_column_names",
    "where",
]
