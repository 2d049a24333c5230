"""Transformations: weighted statistics, centering/standardization, group decomposition and recoding."""

from .arguments import append_columns, prepare_transform, resolve_append_suffix, resolve_overrides
from .base_transformer import BaseTransformer
from .center_scale import CenteringInputs, CenteringResult, get_center_scale, prepare_centering
from .demean import CENTER_STATISTICS, Degrouper, DegroupResult, degroup, demean
from .recode import convert_to_na, slide, to_factor
from .standardize import TransformResult, center, standardize, unstandardize
from .weighted_stats import distribution_mode, weighted_mad, weighted_mean, weighted_median, weighted_sd


__all__ = [
    "CENTER_STATISTICS",
    "BaseTransformer",
    "CenteringInputs",
    "CenteringResult",
    "DegroupResult",
    "Degrouper",
    "TransformResult",
    "append_columns",
    "center",
    "convert_to_na",
    "degroup",
    "demean",
    "distribution_mode",
    "get_center_scale",
    "prepare_centering",
    "prepare_transform",
    "resolve_append_suffix",
    "resolve_overrides",
    "slide",
    "standardize",
    "to_factor",
    "unstandardize",
    "weighted_mad",
    "weighted_mean",
    "weighted_median",
    "weighted_sd",
]
