"""Type classes for pcspace."""

from ._feature_space import FEATURE_COLUMNS, FeatureSpace, empty_feature_table
from ._labels import LabelNormalization

__all__ = [
    "FEATURE_COLUMNS",
    "FeatureSpace",
    "LabelNormalization",
    "empty_feature_table",
]
