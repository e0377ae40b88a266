"""Embedding sources.

Every source exposes the same two methods, ``embedding()`` and
``explained_variance()``, so the feature-space core never branches on where
the principal components were computed.
"""

from ._anndata import AnnDataSource
from ._base import EmbeddingSource, validate_embedding, validate_explained_variance
from ._frame import FrameSource, StdevSource

__all__ = [
    "EmbeddingSource",
    "FrameSource",
    "StdevSource",
    "AnnDataSource",
    "validate_embedding",
    "validate_explained_variance",
]
