from ._components import filter_components
from ._feature_space import feature_space, get_feature_space
from ._features import one_vs_rest_features, rank_features
from ._labels import is_valid_name, make_valid_names, normalize_labels

__all__ = [
    "feature_space",
    "get_feature_space",
    "one_vs_rest_features",
    "rank_features",
    "filter_components",
    "normalize_labels",
    "make_valid_names",
    "is_valid_name",
]
