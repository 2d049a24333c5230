"""Task-specific views over data handed to the transformations."""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class TransformPlan:
    """Immutable per-call snapshot produced by the argument processor.

    Attributes:
        frame: Working frame (rows filtered per NA policy, appended copies already added).
        select: Ordered names of the columns to transform in ``frame``.
        source_columns: Original column names matching ``select`` (differ from ``select`` in append mode).
        weights: Row weights aligned with ``frame`` or ``None`` when unweighted.
        center: Per-column center overrides (``None`` means compute automatically).
        scale: Per-column scale overrides (``None`` means compute automatically).
        append_suffix: Suffix of the appended copies, ``None`` when transforming in place.
    """

    frame: pd.DataFrame
    select: list[str]
    """Ordered names of the columns to transform in ``frame``."""
    source_columns: list[str]
    weights: np.ndarray | None = None
    """Row weights aligned with ``frame``; strictly positive when present."""
    center: tuple[object, ...] = ()
    scale: tuple[object, ...] = ()
    append_suffix: str | None = None

    def __post_init__(self) -> None:
        if len(self.select) != len(self.source_columns):
            raise ValueError("`select` and `source_columns` must have the same length.")

    @property
    def targets(self) -> pd.DataFrame:
        """Return view over the columns to transform."""
        return self.frame.loc[:, self.select]

    def items(self) -> list[tuple[str, str, object, object]]:
        """``(target, source, center_override, scale_override)`` for every selected column."""
        center = self.center or (None,) * len(self.select)
        scale = self.scale or (None,) * len(self.select)
        return list(zip(self.select, self.source_columns, center, scale, strict=True))
