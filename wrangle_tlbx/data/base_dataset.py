"""Dataset handler bundling a frame with the selection and transformation operations."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

import pandas as pd

from wrangle_tlbx.selection.selector import data_select, select_columns
from wrangle_tlbx.selection.specs import is_numeric
from wrangle_tlbx.utils.diagnostics import Diagnostics


if TYPE_CHECKING:
    from wrangle_tlbx.transform.demean import Degrouper
    from wrangle_tlbx.transform.standardize import TransformResult


class TabularDataset:
    """Convenience facade over a :class:`pandas.DataFrame`.

    Every operation records its diagnostics in :attr:`diagnostics`, so the conditions met while
    preparing a dataset can be inspected afterwards.
    """

    def __init__(self, df: pd.DataFrame | None = None, *, verbose: bool = True) -> None:
        """Initialize the dataset.

        Args:
            df: Pre-loaded DataFrame (optional).
            verbose: Toggle diagnostics of all operations.
        """
        if df is not None and not isinstance(df, pd.DataFrame):
            raise TypeError(f"Expected a pandas DataFrame, got {type(df).__name__}.")
        self._df: pd.DataFrame | None = df
        self._df_standardized: pd.DataFrame | None = None
        self.verbose = verbose
        self.diagnostics = Diagnostics(verbose=verbose)

    @property
    def df(self) -> pd.DataFrame:
        """Get the wrapped DataFrame.

        Raises:
            ValueError: If no data was loaded.
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Pass a DataFrame or use with_df().")
        return self._df

    def with_df(self, df: pd.DataFrame) -> "TabularDataset":
        """Return a new dataset wrapping ``df`` with the same settings."""
        return type(self)(df, verbose=self.verbose)

    @property
    def numeric_cols(self) -> list[str]:
        return select_columns(self.df, is_numeric, verbose=False)

    @property
    def df_standardized(self) -> pd.DataFrame:
        """Get the standardized DataFrame (numeric columns z-scored), computed once and cached."""
        if self._df_standardized is None:
            self._df_standardized = self.standardize().data
        return self._df_standardized

    def find_columns(self, select: object = None, exclude: object = None, **kwargs: object) -> list[str]:
        """Names of the columns matched by ``select`` and not by ``exclude``."""
        return select_columns(self.df, select, exclude, diagnostics=self.diagnostics, **kwargs)

    def select(self, select: object = None, exclude: object = None, **kwargs: object) -> pd.DataFrame:
        """Matched columns as a new frame; mapping selections rename the output."""
        return data_select(self.df, select, exclude, diagnostics=self.diagnostics, **kwargs)

    def center(self, select: object = None, exclude: object = None, **kwargs: object) -> "TransformResult":
        """Center selected columns, see :func:`~wrangle_tlbx.transform.standardize.center`."""
        from wrangle_tlbx.transform.standardize import center

        return center(self.df, select, exclude, diagnostics=self.diagnostics, **kwargs)

    def standardize(self, select: object = None, exclude: object = None, **kwargs: object) -> "TransformResult":
        """Standardize selected columns, see :func:`~wrangle_tlbx.transform.standardize.standardize`."""
        from wrangle_tlbx.transform.standardize import standardize

        return standardize(self.df, select, exclude, diagnostics=self.diagnostics, **kwargs)

    def make_degrouper(
        self,
        select: str | Iterable[str],
        by: str | Iterable[str],
        **kwargs: object,
    ) -> "Degrouper":
        """Instantiate a :class:`~wrangle_tlbx.transform.demean.Degrouper` for this dataset."""
        from wrangle_tlbx.transform.demean import Degrouper

        return Degrouper(self.df, select, by, diagnostics=self.diagnostics, **kwargs)

    def demean(self, select: str | Iterable[str], by: str | Iterable[str], **kwargs: object) -> pd.DataFrame:
        """Between/within columns using group means."""
        return self.make_degrouper(select, by, center="mean", **kwargs).fit().result().data

    def degroup(self, select: str | Iterable[str], by: str | Iterable[str], **kwargs: object) -> pd.DataFrame:
        """Between/within columns using the statistic given as ``center=``."""
        return self.make_degrouper(select, by, **kwargs).fit().result().data
