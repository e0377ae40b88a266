"""Tests for embedding sources.

This module tests:
1. FrameSource (variance as Series, mapping or array)
2. StdevSource (variance fractions from standard deviations)
3. AnnDataSource (scanpy PCA layout)
"""

import anndata as ad
import numpy as np
import pandas as pd
import pytest

from pcspace.core.exceptions import ConfigurationError, DataShapeError
from pcspace.sources import AnnDataSource, EmbeddingSource, FrameSource, StdevSource


def _embedding(n_obs=6, n_comps=3):
    np.random.seed(42)
    return pd.DataFrame(
        np.random.randn(n_obs, n_comps),
        index=[f"cell{i}" for i in range(n_obs)],
        columns=[f"PC{i + 1}" for i in range(n_comps)],
    )


class TestFrameSource:
    """Test FrameSource."""

    def test_mapping(self):
        """Variance given as a mapping."""
        source = FrameSource(_embedding(), {"PC1": 0.5, "PC2": 0.3, "PC3": 0.1})

        assert isinstance(source, EmbeddingSource)
        assert source.explained_variance()["PC2"] == 0.3
        assert source.embedding().shape == (6, 3)

    def test_array_in_column_order(self):
        """Variance given as an array is named after the columns."""
        source = FrameSource(_embedding(), np.array([0.5, 0.3, 0.1]))
        assert source.explained_variance().index.tolist() == ["PC1", "PC2", "PC3"]

    def test_series_may_cover_more_components(self):
        """Extra variance entries are allowed."""
        ev = pd.Series({"PC1": 0.5, "PC2": 0.3, "PC3": 0.1, "PC4": 0.05})
        source = FrameSource(_embedding(), ev)
        assert len(source.explained_variance()) == 4

    def test_missing_variance(self):
        """No variance information is a configuration error."""
        with pytest.raises(ConfigurationError):
            FrameSource(_embedding(), None)

    def test_missing_component(self):
        """Every column needs a variance entry."""
        with pytest.raises(ConfigurationError, match="PC3"):
            FrameSource(_embedding(), {"PC1": 0.5, "PC2": 0.3})

    def test_array_length_mismatch(self):
        """An unnamed vector must match the number of columns."""
        with pytest.raises(DataShapeError):
            FrameSource(_embedding(), [0.5, 0.3])

    def test_fractions_above_one(self):
        """Fractions summing above 1 are rejected."""
        with pytest.raises(ConfigurationError, match="sum"):
            FrameSource(_embedding(), [0.8, 0.3, 0.1])

    def test_negative_fraction(self):
        """Negative fractions are rejected."""
        with pytest.raises(ConfigurationError):
            FrameSource(_embedding(), [0.5, -0.1, 0.1])

    def test_not_a_frame(self):
        """The embedding must be a DataFrame."""
        with pytest.raises(TypeError):
            FrameSource(np.zeros((3, 2)), [0.5, 0.3])

    def test_empty_embedding(self):
        """An empty embedding is a shape error."""
        with pytest.raises(DataShapeError):
            FrameSource(pd.DataFrame(), [])

    def test_duplicate_columns(self):
        """Component names must be unique."""
        emb = _embedding()
        emb.columns = ["PC1", "PC1", "PC2"]
        with pytest.raises(DataShapeError, match="not unique"):
            FrameSource(emb, {"PC1": 0.5, "PC2": 0.3})

    def test_repr(self):
        """repr reports the embedding shape."""
        source = FrameSource(_embedding(), [0.5, 0.3, 0.1])
        assert repr(source) == "FrameSource(n_obs=6, n_components=3)"


class TestStdevSource:
    """Test StdevSource."""

    def test_variance_fractions(self):
        """Fractions are stdev^2 over the total."""
        source = StdevSource(_embedding(n_comps=2), [2.0, 1.0])
        ev = source.explained_variance()

        assert np.isclose(ev["PC1"], 0.8)
        assert np.isclose(ev["PC2"], 0.2)
        assert np.isclose(ev.sum(), 1.0)

    def test_named_stdev(self):
        """Standard deviations keyed by component name."""
        source = StdevSource(_embedding(n_comps=2), {"PC2": 1.0, "PC1": 3.0})
        assert np.isclose(source.explained_variance()["PC1"], 0.9)

    def test_missing_stdev(self):
        """No standard deviations is a configuration error."""
        with pytest.raises(ConfigurationError):
            StdevSource(_embedding(), [])

        with pytest.raises(ConfigurationError, match="PC2"):
            StdevSource(_embedding(n_comps=2), {"PC1": 1.0})

    def test_all_zero(self):
        """Zero total variance is rejected."""
        with pytest.raises(ConfigurationError):
            StdevSource(_embedding(n_comps=2), [0.0, 0.0])


class TestAnnDataSource:
    """Test AnnDataSource."""

    @pytest.fixture
    def adata(self):
        """AnnData with a PCA stored the way scanpy stores it."""
        np.random.seed(42)
        adata = ad.AnnData(
            X=np.random.randn(8, 5),
            obs=pd.DataFrame(index=[f"cell{i}" for i in range(8)]),
        )
        adata.obsm["X_pca"] = np.random.randn(8, 3)
        adata.uns["pca"] = {"variance_ratio": np.array([0.5, 0.2, 0.005])}
        return adata

    def test_read_pca(self, adata):
        """Embedding and variance are read from obsm and uns."""
        source = AnnDataSource(adata)
        emb = source.embedding()

        assert emb.columns.tolist() == ["PC1", "PC2", "PC3"]
        assert emb.index.tolist() == adata.obs_names.tolist()
        assert np.allclose(emb.to_numpy(), adata.obsm["X_pca"])
        assert np.isclose(source.explained_variance()["PC3"], 0.005)
        assert source.basis == "X_pca"

    def test_custom_basis_and_prefix(self, adata):
        """Other bases and component prefixes are supported."""
        adata.obsm["X_harmony"] = adata.obsm["X_pca"].copy()
        adata.uns["harmony"] = {"variance_ratio": [0.4, 0.3, 0.1]}

        source = AnnDataSource(
            adata, basis="X_harmony", variance_key=("harmony", "variance_ratio"), prefix="H"
        )
        assert source.embedding().columns.tolist() == ["H1", "H2", "H3"]

    def test_no_pca(self, adata):
        """A missing embedding is a configuration error."""
        del adata.obsm["X_pca"]
        with pytest.raises(ConfigurationError, match="PCA"):
            AnnDataSource(adata)

    def test_no_variance(self, adata):
        """Missing variance ratios are a configuration error."""
        del adata.uns["pca"]
        with pytest.raises(ConfigurationError, match="explained variance"):
            AnnDataSource(adata)

    def test_variance_length_mismatch(self, adata):
        """One ratio per component is required."""
        adata.uns["pca"]["variance_ratio"] = np.array([0.5, 0.2])
        with pytest.raises(DataShapeError):
            AnnDataSource(adata)
