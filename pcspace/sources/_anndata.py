"""Embedding source backed by an AnnData object (scanpy PCA layout)."""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np
import pandas as pd
from anndata import AnnData
from scipy.sparse import issparse

from pcspace.core.exceptions import ConfigurationError, DataShapeError

from ._base import EmbeddingSource, validate_embedding, validate_explained_variance

__all__ = ["AnnDataSource"]


class AnnDataSource(EmbeddingSource):
    """Read a PCA embedding and its variance ratios from AnnData.

    Args:
        adata: Annotated data matrix holding a computed PCA.
        basis: Key in ``adata.obsm`` of the cell embeddings. Defaults to
            ``"X_pca"``.
        variance_key: Path into ``adata.uns`` of the explained-variance
            ratios. Defaults to ``("pca", "variance_ratio")`` as written by
            ``scanpy.tl.pca``.
        prefix: Component name prefix; components are named ``PC1``,
            ``PC2``, ... by default. Ignored when ``obsm[basis]`` is a
            DataFrame, whose own column names are used.

    Raises:
        ConfigurationError: If no embedding is stored under ``basis`` or no
            variance ratios under ``variance_key``.

    Examples:
        >>> import scanpy as sc
        >>> sc.tl.pca(adata, n_comps=30)
        >>> source = AnnDataSource(adata)
        >>> source.embedding().columns[:3].tolist()
        ['PC1', 'PC2', 'PC3']
    """

    def __init__(
        self,
        adata: AnnData,
        basis: str = "X_pca",
        variance_key: Sequence[str] = ("pca", "variance_ratio"),
        prefix: str = "PC",
    ):
        if basis not in adata.obsm:
            raise ConfigurationError(
                f"No embedding found in adata.obsm['{basis}']. "
                "Has a PCA been computed? See scanpy.tl.pca()"
            )

        coords = adata.obsm[basis]
        if isinstance(coords, pd.DataFrame):
            frame = coords.copy()
            frame.index = adata.obs_names
        else:
            if issparse(coords):
                coords = coords.toarray()
            coords = np.asarray(coords)
            if coords.ndim != 2:
                raise DataShapeError(f"adata.obsm['{basis}'] must be 2-D, got shape {coords.shape}")
            columns = [f"{prefix}{i + 1}" for i in range(coords.shape[1])]
            frame = pd.DataFrame(coords, index=adata.obs_names, columns=columns)

        self._embedding = validate_embedding(frame)

        ratios = adata.uns
        path = []
        for key in variance_key:
            path.append(key)
            if not isinstance(ratios, Mapping) or key not in ratios:
                raise ConfigurationError(
                    f"No explained variance found in adata.uns{''.join(f'[{k!r}]' for k in path)}"
                )
            ratios = ratios[key]

        ratios = np.asarray(ratios, dtype=np.float64).ravel()
        if ratios.shape[0] != self._embedding.shape[1]:
            raise DataShapeError(
                f"{ratios.shape[0]} variance ratios for {self._embedding.shape[1]} components"
            )

        self._explained_variance = validate_explained_variance(
            pd.Series(ratios, index=self._embedding.columns), self._embedding.columns
        )
        self.basis = basis

    def embedding(self) -> pd.DataFrame:
        return self._embedding

    def explained_variance(self) -> pd.Series:
        return self._explained_variance
