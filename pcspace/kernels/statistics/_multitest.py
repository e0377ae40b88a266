"""Multiple-testing correction of p-value vectors.

Methods follow the names and semantics of R's ``p.adjust``. The false
discovery rate methods are delegated to SciPy, the family-wise methods to
statsmodels.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import false_discovery_control
from statsmodels.stats.multitest import multipletests

from pcspace.core.exceptions import ConfigurationError

__all__ = ["P_ADJUST_METHODS", "p_adjust", "resolve_p_adjust_method"]

P_ADJUST_METHODS = ("holm", "hochberg", "hommel", "bonferroni", "BH", "BY", "fdr", "none")

_ALIASES = {
    "holm": "holm",
    "hochberg": "hochberg",
    "hommel": "hommel",
    "bonferroni": "bonferroni",
    "bh": "BH",
    "fdr": "BH",
    "fdr_bh": "BH",
    "benjamini-hochberg": "BH",
    "by": "BY",
    "fdr_by": "BY",
    "benjamini-yekutieli": "BY",
    "none": "none",
}

_STATSMODELS_METHODS = {
    "holm": "holm",
    "hochberg": "simes-hochberg",
    "hommel": "hommel",
    "bonferroni": "bonferroni",
}


def resolve_p_adjust_method(method: str) -> str:
    """Map a correction name or alias to its canonical name.

    Raises
    ------
    ConfigurationError
        If ``method`` is not a known correction method.
    """
    if not isinstance(method, str) or method.lower() not in _ALIASES:
        raise ConfigurationError(
            f"Invalid multiple testing correction method: {method!r}. "
            f"Supported methods: {list(P_ADJUST_METHODS)}"
        )
    return _ALIASES[method.lower()]


def p_adjust(p_values: np.ndarray, method: str = "fdr") -> np.ndarray:
    """Adjust p-values for multiple comparisons.

    The number of comparisons is the number of p-values given, so callers
    pass exactly the family of tests to be corrected together.

    Parameters
    ----------
    p_values : array-like
        Raw p-values, 1-D. NaN entries are treated as 1.0.
    method : str, default="fdr"
        One of :data:`P_ADJUST_METHODS` (case-insensitive), or one of the
        aliases ``bh``, ``by``, ``fdr_bh``, ``fdr_by``,
        ``benjamini-hochberg``, ``benjamini-yekutieli``.

    Returns
    -------
    np.ndarray
        Adjusted p-values in input order, each at most 1.

    Examples
    --------
    >>> p_adjust([0.01, 0.04, 0.03], method="fdr")
    array([0.03, 0.04, 0.04])
    >>> p_adjust([0.01, 0.04, 0.03], method="bonferroni")
    array([0.03, 0.12, 0.09])
    """
    canonical = resolve_p_adjust_method(method)

    p = np.asarray(p_values, dtype=np.float64)
    if p.ndim != 1:
        raise ValueError(f"p_values must be 1-D, got shape {p.shape}")
    if p.size == 0:
        return p.copy()

    p = np.where(np.isnan(p), 1.0, p)
    if np.any((p < 0.0) | (p > 1.0)):
        raise ValueError("p-values must lie in [0, 1]")

    if canonical == "none":
        adjusted = p.copy()
    elif canonical == "BH":
        adjusted = false_discovery_control(p, method="bh")
    elif canonical == "BY":
        adjusted = false_discovery_control(p, method="by")
    else:
        _, adjusted, _, _ = multipletests(p, method=_STATSMODELS_METHODS[canonical])

    return np.minimum(np.asarray(adjusted, dtype=np.float64), 1.0)
