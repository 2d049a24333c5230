"""Shared transformation defaults (suffixes, robust constants, name suggestions)."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class TransformConfig:
    """Reusable defaults read by every transformation at call time.

    Attributes:
        standardize_suffix: Suffix of appended columns created by ``standardize``.
        center_suffix: Suffix of appended columns created by ``center``.
        slide_suffix: Suffix of appended columns created by ``slide``.
        factor_suffix: Suffix of appended columns created by ``to_factor``.
        within_suffix: Suffix of the de-meaned (within) columns of ``demean``/``degroup``.
        between_suffix: Suffix of the group-meaned (between) columns of ``demean``/``degroup``.
        mad_constant: Consistency constant applied to the median absolute deviation.
        suggestion_cutoff: Minimum :mod:`difflib` similarity ratio for "did you mean" suggestions.
        max_suggestions: Maximum number of suggestions reported per unresolved name.
    """

    standardize_suffix: str = "_z"
    center_suffix: str = "_c"
    slide_suffix: str = "_s"
    factor_suffix: str = "_f"
    within_suffix: str = "_within"
    between_suffix: str = "_between"
    mad_constant: float = 1.4826
    suggestion_cutoff: float = 0.6
    max_suggestions: int = 3

    def with_overrides(self, **changes: object) -> TransformConfig:
        """Return a copy with selected fields replaced."""
        return replace(self, **changes)


# Default configuration used across transformation functions
DEFAULT_CFG = TransformConfig()


__all__ = ["DEFAULT_CFG", "TransformConfig"]
