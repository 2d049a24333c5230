"""Data module: value kinds, numeric coercion, transform views and the dataset facade."""

from .base_dataset import TabularDataset
from .coercion import ValueKind, as_series, to_numeric, value_kind
from .views import TransformPlan


__all__ = ["TabularDataset", "TransformPlan", "ValueKind", "as_series", "to_numeric", "value_kind"]
