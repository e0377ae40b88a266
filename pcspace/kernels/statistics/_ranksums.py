"""Column-wise Wilcoxon rank-sum (Mann-Whitney U) test, one group vs the rest.

The choice between the exact and the normal-approximation null distribution
follows R's ``wilcox.test`` defaults, so p-values agree with R for the same
inputs:

- exact distribution when both groups hold fewer than ``exact_limit``
  observations and the column has no ties;
- otherwise the normal approximation with mid-ranks, tie-corrected variance
  and continuity correction.

Degenerate columns never raise. They get a p-value of 1.0 and a NaN
statistic: an empty group, a constant column, or non-finite values.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import mannwhitneyu

__all__ = ["ranksums_one_vs_rest"]


def ranksums_one_vs_rest(
    X: np.ndarray,
    positive_mask: np.ndarray,
    *,
    exact_limit: int = 50,
    use_continuity: bool = True,
) -> tuple[np.ndarray, np.ndarray]:
    """Two-sided rank-sum test of every column, positive rows vs the rest.

    Parameters
    ----------
    X : np.ndarray
        Dense matrix, shape (n_obs, n_features). Rows are observations.
    positive_mask : np.ndarray
        Boolean mask of shape (n_obs,). True rows form the positive group,
        False rows the negative ("other") group.
    exact_limit : int, default=50
        Both groups must be smaller than this for the exact test to be used.
    use_continuity : bool, default=True
        Continuity correction for the normal approximation.

    Returns
    -------
    U : np.ndarray
        U statistic of the positive group, shape (n_features,).
    P : np.ndarray
        Two-sided p-values, shape (n_features,).

    Examples
    --------
    >>> X = np.array([[1.0], [2.0], [3.0], [10.0], [11.0], [12.0]])
    >>> mask = np.array([True, True, True, False, False, False])
    >>> U, P = ranksums_one_vs_rest(X, mask)
    >>> float(U[0]), round(float(P[0]), 3)
    (0.0, 0.1)
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"X must be 2-D, got shape {X.shape}")

    mask = np.asarray(positive_mask, dtype=bool)
    if mask.ndim != 1 or mask.shape[0] != X.shape[0]:
        raise ValueError(
            f"positive_mask must be 1-D with length {X.shape[0]} (number of observations)"
        )

    n_features = X.shape[1]
    U = np.full(n_features, np.nan, dtype=np.float64)
    P = np.ones(n_features, dtype=np.float64)

    n_pos = int(mask.sum())
    n_neg = mask.shape[0] - n_pos
    if n_pos == 0 or n_neg == 0:
        return U, P

    small = n_pos < exact_limit and n_neg < exact_limit

    for j in range(n_features):
        col = X[:, j]
        if not np.all(np.isfinite(col)) or np.all(col == col[0]):
            continue

        has_ties = np.unique(col).size < col.size
        method = "exact" if small and not has_ties else "asymptotic"

        res = mannwhitneyu(
            col[mask],
            col[~mask],
            alternative="two-sided",
            use_continuity=use_continuity,
            method=method,
        )
        U[j] = res.statistic
        P[j] = min(float(res.pvalue), 1.0)

    return U, P
