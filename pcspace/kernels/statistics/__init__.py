"""Statistical kernels for principal-component feature selection.

Available Functions:
    - ranksums_one_vs_rest: Wilcoxon rank-sum test of one group against the
      rest, column by column
    - p_adjust: Multiple-testing correction with R ``p.adjust`` semantics

Examples:
    >>> import numpy as np
    >>> from pcspace.kernels.statistics import p_adjust, ranksums_one_vs_rest
    >>>
    >>> X = np.random.default_rng(0).normal(size=(60, 10))
    >>> mask = np.arange(60) < 20
    >>> U, P = ranksums_one_vs_rest(X, mask)
    >>> P_adj = p_adjust(P, method="fdr")
"""

from ._multitest import P_ADJUST_METHODS, p_adjust, resolve_p_adjust_method
from ._ranksums import ranksums_one_vs_rest

__all__ = [
    "ranksums_one_vs_rest",
    "p_adjust",
    "resolve_p_adjust_method",
    "P_ADJUST_METHODS",
]
