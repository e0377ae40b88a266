"""Interface between the feature-space core and embedding producers."""

from __future__ import annotations

from abc import ABC, abstractmethod

import pandas as pd

from pcspace.core.exceptions import ConfigurationError, DataShapeError

__all__ = ["EmbeddingSource", "validate_embedding", "validate_explained_variance"]


class EmbeddingSource(ABC):
    """Provider of a principal-component embedding and its variance split.

    The two methods are addressed by matching component names: every column
    of :meth:`embedding` must have an entry in :meth:`explained_variance`.
    """

    @abstractmethod
    def embedding(self) -> pd.DataFrame:
        """Observations x components matrix with named columns."""

    @abstractmethod
    def explained_variance(self) -> pd.Series:
        """Explained-variance fraction per component, indexed by name."""

    def __repr__(self) -> str:
        emb = self.embedding()
        return f"{self.__class__.__name__}(n_obs={emb.shape[0]}, n_components={emb.shape[1]})"


def validate_embedding(embedding: pd.DataFrame) -> pd.DataFrame:
    """Check an embedding frame and return it with float values.

    Raises:
        DataShapeError: If the frame is empty or its row or column names
            are not unique.
    """
    if not isinstance(embedding, pd.DataFrame):
        raise TypeError(f"embedding must be a pandas DataFrame, got {type(embedding).__name__}")
    if embedding.shape[0] == 0 or embedding.shape[1] == 0:
        raise DataShapeError(f"Embedding is empty (shape {embedding.shape})")

    embedding = embedding.astype("float64")
    embedding.columns = embedding.columns.astype(str)

    if not embedding.columns.is_unique:
        dup = embedding.columns[embedding.columns.duplicated()].unique().tolist()
        raise DataShapeError(f"Embedding component names are not unique: {dup}")
    if not embedding.index.is_unique:
        raise DataShapeError("Embedding observation identifiers are not unique")
    return embedding


def validate_explained_variance(
    explained_variance: pd.Series | None,
    components: pd.Index,
) -> pd.Series:
    """Check that every component has an explained-variance fraction.

    Raises:
        ConfigurationError: If no variance information is available, or
            some components have none.
    """
    if explained_variance is None or len(explained_variance) == 0:
        raise ConfigurationError(
            "No explained variance information available for the embedding"
        )

    explained_variance = pd.Series(explained_variance, dtype="float64")
    explained_variance.index = explained_variance.index.astype(str)

    missing = [str(c) for c in components if str(c) not in explained_variance.index]
    if missing:
        raise ConfigurationError(
            f"Explained variance missing for components: {missing}"
        )
    if explained_variance.isna().any() or (explained_variance < 0).any():
        raise ConfigurationError("Explained variance fractions must be non-negative numbers")
    if explained_variance.sum() > 1.0 + 1e-6:
        raise ConfigurationError(
            f"Explained variance fractions sum to {explained_variance.sum():.4f} (> 1)"
        )
    return explained_variance
