"""One-vs-rest selection of informative principal components for one class."""

from __future__ import annotations

import numpy as np
import pandas as pd

from pcspace.core.exceptions import ConfigurationError, DataShapeError
from pcspace.kernels.statistics import p_adjust, ranksums_one_vs_rest
from pcspace.types import FEATURE_COLUMNS, empty_feature_table
from pcspace.utils import get_logger

logger = get_logger()

__all__ = ["one_vs_rest_features", "rank_features"]


def rank_features(
    p_values: pd.Series,
    explained_variance: pd.Series,
    correction: str = "fdr",
    sig: float = 0.05,
) -> pd.DataFrame:
    """Correct, filter and rank per-component p-values of one class.

    The correction is applied over exactly the components in ``p_values``.
    Components with an adjusted p-value below ``sig`` are kept and sorted by
    adjusted p-value; ties keep the order of ``p_values``. ``expVar`` is
    looked up by component name and ``cumExpVar`` is its running sum in the
    final row order.

    Parameters
    ----------
    p_values : pd.Series
        Raw p-value per component, indexed by component name, in embedding
        column order.
    explained_variance : pd.Series
        Explained-variance fraction of every component of the embedding.
    correction : str, default="fdr"
        Multiple-testing correction method, see :func:`~pcspace.kernels.statistics.p_adjust`.
    sig : float, default=0.05
        Significance level for the adjusted p-values.

    Returns
    -------
    pd.DataFrame
        Columns ``component``, ``pValue``, ``pValueAdj``, ``expVar``,
        ``cumExpVar``. Zero rows when nothing is significant.
    """
    if not 0.0 < sig < 1.0:
        raise ConfigurationError(f"sig must be in (0, 1), got {sig}")

    p_values = pd.Series(p_values, dtype="float64")
    adjusted = p_adjust(p_values.to_numpy(), method=correction)

    table = pd.DataFrame(
        {
            "component": [str(c) for c in p_values.index],
            "pValue": p_values.to_numpy(),
            "pValueAdj": adjusted,
        }
    )
    table = table[table["pValueAdj"] < sig].sort_values("pValueAdj", kind="stable").copy()
    if table.empty:
        return empty_feature_table()

    explained_variance = pd.Series(explained_variance, dtype="float64")
    explained_variance.index = explained_variance.index.astype(str)
    exp_var = explained_variance.reindex(table["component"])
    if exp_var.isna().any():
        missing = exp_var.index[exp_var.isna()].tolist()
        raise ConfigurationError(f"Explained variance missing for components: {missing}")

    table["expVar"] = exp_var.to_numpy()
    table["cumExpVar"] = table["expVar"].cumsum()

    # Categories in rank order
    ranked = table["component"].tolist()
    table["component"] = pd.Categorical(ranked, categories=ranked, ordered=True)

    return table.reset_index(drop=True)[FEATURE_COLUMNS]


def one_vs_rest_features(
    positive_class: str,
    explained_variance: pd.Series,
    labels: pd.Series,
    embedding: pd.DataFrame,
    correction: str = "fdr",
    sig: float = 0.05,
) -> pd.DataFrame:
    """Informative components separating one class from all others.

    Observations labelled ``positive_class`` form the positive group, every
    other observation the negative ("other") group, however many classes
    there are. Each column of ``embedding`` is tested with a two-sided
    Wilcoxon rank-sum test and the p-values go through :func:`rank_features`.
    Degenerate columns (constant, non-finite) get a p-value of 1.0.

    Args:
        positive_class: Class tested against the rest.
        explained_variance: Explained-variance fraction of every component,
            not just the tested ones.
        labels: One label per embedding row, in row order.
        embedding: Observations x tested components.
        correction: Multiple-testing correction method.
        sig: Significance level for the adjusted p-values.

    Returns:
        The class's result table; possibly zero rows.

    Raises:
        DataShapeError: If ``positive_class`` is not a label level, or the
            labels and the embedding differ in length.

    Examples:
        >>> table = one_vs_rest_features("A", exp_var, labels, pcs)
        >>> table[["component", "pValueAdj", "cumExpVar"]]
          component  pValueAdj  cumExpVar
        0       PC1   0.015873        0.4
    """
    if len(labels) != embedding.shape[0]:
        raise DataShapeError(
            f"Labels have {len(labels)} entries but the embedding has "
            f"{embedding.shape[0]} observations"
        )

    if isinstance(getattr(labels, "dtype", None), pd.CategoricalDtype):
        levels = list(labels.cat.categories)
    else:
        levels = pd.unique(np.asarray(labels, dtype=object)).tolist()
    if positive_class not in levels:
        raise DataShapeError(
            f"Positive class '{positive_class}' is not one of the classes: {levels}"
        )

    positive = np.asarray(labels, dtype=object) == positive_class
    logger.debug(
        f"Testing '{positive_class}' ({int(positive.sum())} cells) vs other "
        f"({int((~positive).sum())} cells) on {embedding.shape[1]} components"
    )

    values = embedding.to_numpy(dtype=np.float64)
    non_finite = embedding.columns[~np.isfinite(values).all(axis=0)].tolist()
    if non_finite:
        logger.warning(
            f"Components with NaN or infinite scores are not tested for "
            f"'{positive_class}': {non_finite}"
        )

    _, P = ranksums_one_vs_rest(values, positive)
    p_values = pd.Series(P, index=embedding.columns)

    return rank_features(p_values, explained_variance, correction=correction, sig=sig)
