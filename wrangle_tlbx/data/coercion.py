"""Value-kind classification and the shared categorical/logical/date to numeric conversion."""

from __future__ import annotations

from enum import StrEnum

import numpy as np
import pandas as pd
from pandas.api import types as ptypes


class ValueKind(StrEnum):
    """Closed set of vector kinds every transformation dispatches on."""

    NUMERIC = "numeric"
    LOGICAL = "logical"
    DATE = "date"
    CATEGORICAL = "categorical"
    CHARACTER = "character"
    UNSUPPORTED = "unsupported"

    @property
    def is_categorical_like(self) -> bool:
        """Categoricals and free text, i.e. kinds dropped from numeric transforms by default."""
        return self in (ValueKind.CATEGORICAL, ValueKind.CHARACTER)


def as_series(x: object, name: str | None = None) -> pd.Series:
    """Wrap vectors (lists, arrays, categoricals) into a :class:`pandas.Series`."""
    if isinstance(x, pd.Series):
        return x
    if isinstance(x, pd.DataFrame):
        raise TypeError("Expected a vector, got a DataFrame. Use the data frame form instead.")
    if isinstance(x, np.ndarray) and x.ndim != 1:
        raise TypeError(f"Expected a one-dimensional vector, got an array of shape {x.shape}.")
    if np.isscalar(x):
        x = [x]
    return pd.Series(x, name=name)


def value_kind(x: pd.Series) -> ValueKind:
    """Classify a series into one of the :class:`ValueKind` variants."""
    dtype = x.dtype
    if ptypes.is_bool_dtype(dtype):
        return ValueKind.LOGICAL
    if isinstance(dtype, pd.CategoricalDtype):
        return ValueKind.CATEGORICAL
    if ptypes.is_datetime64_any_dtype(dtype):
        return ValueKind.DATE
    if ptypes.is_complex_dtype(dtype):
        return ValueKind.UNSUPPORTED
    if ptypes.is_numeric_dtype(dtype):
        return ValueKind.NUMERIC
    if ptypes.is_string_dtype(dtype) or ptypes.is_object_dtype(dtype):
        return ValueKind.CHARACTER
    return ValueKind.UNSUPPORTED


def _categorical_to_numeric(cat: pd.Series) -> pd.Series:
    used = cat.cat.remove_unused_categories()
    levels = used.cat.categories
    codes = used.cat.codes.to_numpy()
    if not len(levels):
        return pd.Series(np.nan, index=cat.index, name=cat.name, dtype=float)

    as_numbers = pd.to_numeric(pd.Series(levels.astype(str)), errors="coerce").to_numpy(dtype=float)
    if np.isnan(as_numbers).any():
        lookup = np.arange(1, len(levels) + 1, dtype=float)
    else:
        # levels are numbers in disguise ("1", "5", "10"), use their values
        lookup = as_numbers
    values = np.where(codes >= 0, lookup[np.clip(codes, 0, None)], np.nan)
    return pd.Series(values, index=cat.index, name=cat.name)


def to_numeric(x: pd.Series) -> pd.Series:
    """Convert a series of any supported kind into floats, keeping missing values in place.

    - numeric: cast to float
    - logical: ``False``/``True`` become ``0``/``1``
    - date: days since the Unix epoch
    - categorical: numeric level labels are used as values, otherwise dense codes ``1..k`` in level order
    - character: converted to a categorical with sorted levels first

    Raises:
        TypeError: If the series is of an unsupported kind (e.g. complex numbers).
    """
    kind = value_kind(x)
    if kind is ValueKind.NUMERIC:
        return x.astype(float)
    if kind is ValueKind.LOGICAL:
        values = x.astype("Float64").to_numpy(dtype=float, na_value=np.nan)
        return pd.Series(values, index=x.index, name=x.name)
    if kind is ValueKind.DATE:
        stamps = x.dt.tz_convert(None) if getattr(x.dt, "tz", None) is not None else x
        return (stamps - pd.Timestamp("1970-01-01")) / pd.Timedelta(days=1)
    if kind is ValueKind.CATEGORICAL:
        return _categorical_to_numeric(x)
    if kind is ValueKind.CHARACTER:
        text = x.where(x.isna(), x.astype(str))
        return _categorical_to_numeric(text.astype("category"))
    raise TypeError(f"Cannot convert values of dtype `{x.dtype}` to numeric.")
