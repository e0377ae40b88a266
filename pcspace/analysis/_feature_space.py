"""Feature space construction: informative components for every class."""

from __future__ import annotations

from multiprocessing import Pool

import numpy as np
import pandas as pd
from anndata import AnnData
from tqdm import tqdm

from pcspace.core.config import FeatureSpaceConfig
from pcspace.core.exceptions import ConfigurationError, DataShapeError
from pcspace.sources import AnnDataSource, EmbeddingSource
from pcspace.types import FeatureSpace
from pcspace.utils import get_logger

from ._components import filter_components
from ._features import one_vs_rest_features
from ._labels import normalize_labels

logger = get_logger()

__all__ = ["feature_space", "get_feature_space"]


def _resolve_config(config: FeatureSpaceConfig | None, overrides: dict) -> FeatureSpaceConfig:
    if config is None:
        return FeatureSpaceConfig.from_dict(overrides)
    if overrides:
        return FeatureSpaceConfig.from_dict({**config.to_dict(), **overrides})
    return FeatureSpaceConfig.from_dict(config.to_dict())


def _align_labels(labels, embedding: pd.DataFrame, key: str) -> pd.Series:
    """Return labels in embedding row order, indexed like the embedding."""
    n_obs = embedding.shape[0]

    if isinstance(labels, pd.Series):
        if labels.index.equals(embedding.index):
            return labels
        if (
            len(labels) == n_obs
            and labels.index.is_unique
            and set(labels.index) == set(embedding.index)
        ):
            return labels.reindex(embedding.index)

    if len(labels) != n_obs:
        raise DataShapeError(
            f"'{key}' has {len(labels)} labels but the embedding has {n_obs} observations"
        )
    values = labels.array if isinstance(labels, pd.Series) else labels
    return pd.Series(values, index=embedding.index, name=key)


def _worker_wrapper(args: tuple) -> pd.DataFrame:
    """Wrapper for parallel execution."""
    return one_vs_rest_features(*args)


def _run_classes(
    classes: list[str],
    explained_variance: pd.Series,
    labels: pd.Series,
    embedding: pd.DataFrame,
    config: FeatureSpaceConfig,
) -> list[pd.DataFrame]:
    """Run the one-vs-rest selection per class, results in ``classes`` order."""
    args_list = [
        (name, explained_variance, labels, embedding, config.correction, config.sig)
        for name in classes
    ]

    if config.num_workers > 1 and len(classes) > 1:
        with Pool(min(config.num_workers, len(classes))) as pool:
            if config.show_progress:
                return list(
                    tqdm(
                        pool.imap(_worker_wrapper, args_list),
                        total=len(args_list),
                        desc="Selecting features",
                    )
                )
            return pool.map(_worker_wrapper, args_list)

    iterator = args_list
    if config.show_progress:
        iterator = tqdm(iterator, desc="Selecting features")
    return [_worker_wrapper(args) for args in iterator]


def feature_space(
    source: EmbeddingSource,
    labels,
    label_key: str = "label",
    config: FeatureSpaceConfig | None = None,
    **config_kwargs,
) -> FeatureSpace:
    """Find the class-informative principal components of a labeling.

    For each class a two-sided Wilcoxon rank-sum test compares the scores of
    the class against all other classes on every component explaining more
    than ``var_lim`` of the variance. P-values are corrected per class and
    the significant components are ranked by adjusted p-value.

    With exactly two classes a single run is made, with the first level as
    the positive class. With three or more classes every class is tested
    against the union of the rest. Classes without any significant
    component are dropped from the result and reported in one warning.

    Parameters
    ----------
    source : EmbeddingSource
        Provider of the embedding and its explained-variance fractions.
    labels
        One class label per observation. A Series whose index holds the
        embedding's observation ids is aligned by index, anything else by
        position.
    label_key : str, default="label"
        Name of the label field; reported in the result and used to derive
        the sanitised field name.
    config : FeatureSpaceConfig, optional
        Run parameters. Defaults to ``FeatureSpaceConfig()``.
    **config_kwargs
        Overrides of individual config fields (``var_lim``, ``correction``,
        ``sig``, ``num_workers``, ``show_progress``).

    Returns
    -------
    FeatureSpace
        Per-class tables plus the explained variance and label key used.

    Raises
    ------
    ConfigurationError
        Invalid parameters, missing variance information, colliding class
        names.
    DataShapeError
        Labels and embedding disagree in length, or fewer than two classes.

    Examples
    --------
    >>> source = FrameSource(pcs, {"PC1": 0.4, "PC2": 0.2})
    >>> space = feature_space(source, cells["cell_type"], label_key="cell_type")
    >>> space.classes
    ['A']
    >>> space.features["A"]
      component   pValue  pValueAdj  expVar  cumExpVar
    0       PC1  0.00794   0.015873     0.4        0.4
    """
    config = _resolve_config(config, config_kwargs)

    if not isinstance(source, EmbeddingSource):
        raise TypeError(f"source must be an EmbeddingSource, got {type(source).__name__}")

    embedding = source.embedding()
    explained_variance = source.explained_variance()

    labels = _align_labels(labels, embedding, label_key)
    normalized = normalize_labels(labels, key=label_key)
    filtered, components = filter_components(embedding, explained_variance, var_lim=config.var_lim)

    levels = normalized.levels
    if len(levels) < 2:
        raise DataShapeError(
            f"'{normalized.key}' must have at least two classes, found {levels}"
        )

    if len(levels) == 2:
        classes = [levels[0]]
        logger.info(
            f"First level '{levels[0]}' of '{normalized.key}' considered as positive class"
        )
    else:
        classes = levels

    if len(set(classes)) != len(classes):
        raise ConfigurationError(f"Class names of '{normalized.key}' are not unique: {classes}")

    logger.info(
        f"🔬 Selecting informative components for {len(classes)} class(es) "
        f"of '{normalized.key}' over {len(components)} components "
        f"(correction={config.correction}, sig={config.sig})"
    )

    tables = _run_classes(classes, explained_variance, normalized.labels, filtered, config)

    features = {}
    dropped = []
    for name, table in zip(classes, tables):
        if table.empty:
            dropped.append(name)
        else:
            features[name] = table

    if dropped:
        logger.warning(
            "No features were found for classes:\n" + "\n".join(f"  {name}" for name in dropped)
        )

    n_selected = {name: len(table) for name, table in features.items()}
    logger.info(f"✅ DONE! Informative components per class: {n_selected}")

    return FeatureSpace(
        features=features,
        explained_variance=explained_variance,
        label_key=normalized.key,
        components=components,
        labels=normalized.labels,
        dropped=dropped,
        renamed=dict(normalized.renamed),
        config=config,
    )


def get_feature_space(
    adata: AnnData,
    pvar: str,
    *,
    config: FeatureSpaceConfig | None = None,
    basis: str = "X_pca",
    variance_key: tuple[str, ...] = ("pca", "variance_ratio"),
    key_added: str = "feature_space",
    copy: bool = False,
    **config_kwargs,
) -> FeatureSpace | tuple[AnnData, FeatureSpace]:
    """Feature space of an AnnData object with a computed PCA.

    Reads the embedding from ``adata.obsm[basis]``, the variance ratios from
    ``adata.uns`` and the classes from ``adata.obs[pvar]``, then runs
    :func:`feature_space`. Writes back to ``adata`` (or to its copy):

    - ``adata.obs[f"{pvar}.valid"]``: sanitised classes, only when class
      names had to be renamed;
    - ``adata.uns[key_added]``: ``features``, ``explained_variance``,
      ``pvar``, ``components``, ``dropped`` and ``params``.

    Parameters
    ----------
    adata
        Annotated data matrix.
    pvar
        Column of ``adata.obs`` holding the classes to predict.
    config
        Run parameters. Defaults to ``FeatureSpaceConfig()``.
    basis
        Key of the embedding in ``adata.obsm``.
    variance_key
        Path into ``adata.uns`` of the explained-variance ratios.
    key_added
        Key in ``adata.uns`` where the result is stored.
    copy
        Work on a copy of ``adata`` and return it with the result.
    **config_kwargs
        Overrides of individual config fields.

    Returns
    -------
    The FeatureSpace, or ``(adata_copy, FeatureSpace)`` when ``copy=True``.

    Raises
    ------
    ConfigurationError
        If ``pvar`` is not a column of ``adata.obs``, no PCA is stored, or
        any parameter is invalid.

    Examples
    --------
    >>> import scanpy as sc
    >>> sc.tl.pca(adata, n_comps=30)
    >>> space = get_feature_space(adata, "cell_type")
    >>> adata.uns["feature_space"]["features"].keys()
    """
    if copy:
        adata = adata.copy()

    if pvar not in adata.obs.columns:
        raise ConfigurationError(f"Prediction variable '{pvar}' is not stored in adata.obs")

    source = AnnDataSource(adata, basis=basis, variance_key=variance_key)
    space = feature_space(source, adata.obs[pvar], label_key=pvar, config=config, **config_kwargs)

    if space.label_key != pvar:
        adata.obs[space.label_key] = pd.Categorical(
            np.asarray(space.labels, dtype=object),
            categories=space.labels.cat.categories,
        )
        logger.info(f"Sanitised classes stored in adata.obs['{space.label_key}']")

    adata.uns[key_added] = space.to_dict()
    logger.info(f"Results stored in adata.uns['{key_added}']")

    return (adata, space) if copy else space
