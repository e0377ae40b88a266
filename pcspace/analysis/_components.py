"""Selection of the components that take part in testing."""

from __future__ import annotations

import pandas as pd

from pcspace.core.exceptions import ConfigurationError
from pcspace.sources import validate_explained_variance
from pcspace.utils import get_logger

logger = get_logger()

__all__ = ["filter_components"]


def filter_components(
    embedding: pd.DataFrame,
    explained_variance: pd.Series | None,
    var_lim: float = 0.01,
) -> tuple[pd.DataFrame, list[str]]:
    """Keep the components explaining strictly more than ``var_lim`` variance.

    Args:
        embedding: Observations x components frame.
        explained_variance: Fraction of variance per component, by name.
        var_lim: Threshold on the explained-variance fraction.

    Returns:
        The filtered embedding (column order preserved) and the names of the
        kept components.

    Raises:
        ConfigurationError: If no variance information is available, some
            column has none, or no component passes the threshold.
    """
    explained_variance = validate_explained_variance(explained_variance, embedding.columns)

    columns = [str(c) for c in embedding.columns]
    keep = [c for c in columns if explained_variance[c] > var_lim]

    if not keep:
        raise ConfigurationError(
            f"No component explains more than var_lim={var_lim} of the variance "
            f"(largest fraction: {explained_variance.reindex(columns).max():.4g})"
        )

    n_dropped = len(columns) - len(keep)
    if n_dropped:
        logger.info(
            f"Keeping {len(keep)} of {len(columns)} components "
            f"with explained variance > {var_lim}"
        )

    filtered = embedding.copy()
    filtered.columns = columns
    return filtered[keep], keep
