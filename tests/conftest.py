"""Test configuration for the wrangling toolbox."""

from pathlib import Path
import sys

import numpy as np
import pandas as pd
import pytest


# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def iris_df() -> pd.DataFrame:
    """Small iris-like frame with four measurements and a species factor."""
    return pd.DataFrame(
        {
            "Sepal.Length": [5.1, 4.9, 7.0, 6.4, 6.3, 5.8],
            "Sepal.Width": [3.5, 3.0, 3.2, 3.2, 3.3, 2.7],
            "Petal.Length": [1.4, 1.4, 4.7, 4.5, 6.0, 5.1],
            "Petal.Width": [0.2, 0.2, 1.4, 1.5, 2.5, 1.9],
            "Species": pd.Categorical(
                ["setosa", "setosa", "versicolor", "versicolor", "virginica", "virginica"],
            ),
        },
    )


@pytest.fixture
def small_df() -> pd.DataFrame:
    """Two numeric columns with known centers and scales."""
    return pd.DataFrame({"a": [-2.0, -1.0, 0.0, 1.0, 2.0], "b": [3.0, 4.0, 5.0, 6.0, 7.0]})


@pytest.fixture
def panel_df() -> pd.DataFrame:
    """Repeated measurements of three subjects with a numeric, a binary and a three-level predictor."""
    rng = np.random.default_rng(42)
    n_per_id = 4
    ids = np.repeat([1, 2, 3], n_per_id)
    return pd.DataFrame(
        {
            "id": ids,
            "x": rng.normal(loc=ids * 2.0, scale=1.0),
            "z": rng.normal(size=ids.size),
            "binary": pd.Categorical(["no", "yes"] * (ids.size // 2)),
            "grade": pd.Categorical(["low", "mid", "high", "mid"] * 3, categories=["low", "mid", "high"]),
        },
    )


@pytest.fixture
def cross_df() -> pd.DataFrame:
    """Eight observations cross-classified by two grouping factors with groups of size >= 2."""
    return pd.DataFrame(
        {
            "g1": ["a", "a", "a", "a", "b", "b", "b", "b"],
            "g2": ["u", "u", "v", "v", "u", "u", "v", "v"],
            "y": [1.0, 3.0, 2.0, 6.0, 4.0, 8.0, 5.0, 7.0],
        },
    )
