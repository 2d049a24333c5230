"""Column selection, centering/standardization and within/between decomposition for pandas frames."""

import logging

from .data import TabularDataset, TransformPlan, ValueKind
from .selection import (
    contains,
    data_extract,
    data_select,
    ends_with,
    is_character,
    is_factor,
    is_logical,
    is_numeric,
    regex,
    select_columns,
    starts_with,
    where,
)
from .selection.specs import col_range
from .transform import (
    CenteringResult,
    Degrouper,
    DegroupResult,
    TransformResult,
    center,
    convert_to_na,
    degroup,
    demean,
    distribution_mode,
    slide,
    standardize,
    to_factor,
    unstandardize,
    weighted_mad,
    weighted_mean,
    weighted_median,
    weighted_sd,
)
from .utils import DEFAULT_CFG, Diagnostic, Diagnostics, TransformConfig, configure_logging


logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CFG",
    "CenteringResult",
    "DegroupResult",
    "Degrouper",
    "Diagnostic",
    "Diagnostics",
    "TabularDataset",
    "TransformConfig",
    "TransformPlan",
    "TransformResult",
    "ValueKind",
    "center",
    "col_range",
    "configure_logging",
    "contains",
    "convert_to_na",
    "data_extract",
    "data_select",
    "degroup",
    "demean",
    "distribution_mode",
    "ends_with",
    "is_character",
    "is_factor",
    "is_logical",
    "is_numeric",
    "regex",
    "select_columns",
    "slide",
    "standardize",
    "starts_with",
    "to_factor",
    "unstandardize",
    "weighted_mad",
    "weighted_mean",
    "weighted_median",
    "weighted_sd",
    "where",
]
