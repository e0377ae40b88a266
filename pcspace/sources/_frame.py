"""In-memory embedding sources."""

from __future__ import annotations

from typing import Mapping

import numpy as np
import pandas as pd

from pcspace.core.exceptions import ConfigurationError, DataShapeError

from ._base import EmbeddingSource, validate_embedding, validate_explained_variance

__all__ = ["FrameSource", "StdevSource"]


def _as_named_series(values, columns: pd.Index, what: str) -> pd.Series:
    """Name an unlabelled vector after the embedding columns."""
    if isinstance(values, pd.Series):
        return values
    if isinstance(values, Mapping):
        return pd.Series(dict(values), dtype="float64")

    values = np.asarray(values, dtype=np.float64).ravel()
    if values.shape[0] != len(columns):
        raise DataShapeError(
            f"{what} has {values.shape[0]} entries but the embedding has {len(columns)} components"
        )
    return pd.Series(values, index=columns)


class FrameSource(EmbeddingSource):
    """Embedding with precomputed explained-variance fractions.

    Args:
        embedding: Observations x components frame.
        explained_variance: Fraction of variance per component. A Series or
            mapping keyed by component name, or an array in column order.
            May cover more components than the embedding holds.

    Raises:
        ConfigurationError: If ``explained_variance`` is missing or does not
            cover every embedding column.

    Examples:
        >>> source = FrameSource(pcs, {"PC1": 0.4, "PC2": 0.2})
        >>> source.explained_variance()
        PC1    0.4
        PC2    0.2
        dtype: float64
    """

    def __init__(self, embedding: pd.DataFrame, explained_variance):
        self._embedding = validate_embedding(embedding)
        if explained_variance is None:
            raise ConfigurationError(
                "No explained variance information available for the embedding"
            )
        named = _as_named_series(explained_variance, self._embedding.columns, "explained_variance")
        self._explained_variance = validate_explained_variance(named, self._embedding.columns)

    def embedding(self) -> pd.DataFrame:
        return self._embedding

    def explained_variance(self) -> pd.Series:
        return self._explained_variance


class StdevSource(EmbeddingSource):
    """Embedding described by per-component standard deviations.

    The explained-variance fraction of component ``i`` is
    ``stdev[i] ** 2 / sum(stdev ** 2)`` over the given components, the
    convention of reductions that only keep standard deviations (e.g.
    Seurat's ``Stdev``).

    Args:
        embedding: Observations x components frame.
        stdev: Standard deviation per component, in column order or keyed by
            component name.
    """

    def __init__(self, embedding: pd.DataFrame, stdev):
        self._embedding = validate_embedding(embedding)
        if stdev is None or len(stdev) == 0:
            raise ConfigurationError(
                "No standard deviations available; has a PCA been computed for this embedding?"
            )

        stdev = _as_named_series(stdev, self._embedding.columns, "stdev").astype("float64")
        stdev.index = stdev.index.astype(str)
        stdev = stdev.reindex(self._embedding.columns)
        if stdev.isna().any():
            missing = stdev.index[stdev.isna()].tolist()
            raise ConfigurationError(f"Standard deviation missing for components: {missing}")

        variance = stdev**2
        total = variance.sum()
        if total <= 0:
            raise ConfigurationError("Standard deviations are all zero; no variance to split")

        self._explained_variance = validate_explained_variance(
            variance / total, self._embedding.columns
        )

    def embedding(self) -> pd.DataFrame:
        return self._embedding

    def explained_variance(self) -> pd.Series:
        return self._explained_variance
