"""pcspace: class-informative principal components for cell type prediction.

pcspace provides:
- One-vs-rest Wilcoxon rank-sum testing of principal components per class
- Multiple-testing correction with R ``p.adjust`` semantics
- Feature spaces ranking the significant components of every class
- Embedding sources for in-memory frames and AnnData objects
"""

__version__ = "1.0.0"

from . import analysis, core, kernels, sources, types, utils
from .analysis import (
    feature_space,
    filter_components,
    get_feature_space,
    normalize_labels,
    one_vs_rest_features,
    rank_features,
)
from .core import ConfigurationError, DataError, DataShapeError, FeatureSpaceConfig, PCSpaceError
from .sources import AnnDataSource, EmbeddingSource, FrameSource, StdevSource
from .types import FeatureSpace, LabelNormalization

__all__ = [
    # Version
    "__version__",
    # Entry points
    "feature_space",
    "get_feature_space",
    "one_vs_rest_features",
    "rank_features",
    "filter_components",
    "normalize_labels",
    # Config and errors
    "FeatureSpaceConfig",
    "PCSpaceError",
    "ConfigurationError",
    "DataError",
    "DataShapeError",
    # Sources
    "EmbeddingSource",
    "FrameSource",
    "StdevSource",
    "AnnDataSource",
    # Types
    "FeatureSpace",
    "LabelNormalization",
    # Modules
    "analysis",
    "core",
    "kernels",
    "sources",
    "types",
    "utils",
]
