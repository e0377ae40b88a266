"""Tests for pcspace.kernels.statistics.

This module tests:
1. ranksums_one_vs_rest (exact vs asymptotic selection, degenerate columns)
2. p_adjust (R p.adjust values, aliases, clipping)
"""

import numpy as np
import pytest
from scipy.stats import mannwhitneyu

from pcspace.core.exceptions import ConfigurationError
from pcspace.kernels.statistics import P_ADJUST_METHODS, p_adjust, ranksums_one_vs_rest


# =============================================================================
# Test ranksums_one_vs_rest
# =============================================================================


class TestRankSums:
    """Tests for the column-wise rank-sum kernel."""

    @pytest.fixture
    def separated(self):
        """Two groups of five, perfectly separated on the first column."""
        X = np.column_stack(
            [
                np.array([1, 2, 3, 4, 5, 10, 11, 12, 13, 14], dtype=float),
                np.zeros(10),
            ]
        )
        mask = np.array([True] * 5 + [False] * 5)
        return X, mask

    def test_exact_matches_r(self, separated):
        """wilcox.test(1:5, 10:14) in R gives p = 2 / choose(10, 5)."""
        X, mask = separated
        U, P = ranksums_one_vs_rest(X, mask)

        assert U[0] == 0.0
        assert np.isclose(P[0], 2 / 252)

    def test_three_vs_three(self):
        """wilcox.test(1:3, 4:6) in R gives p = 0.1."""
        X = np.array([[1.0], [2.0], [3.0], [4.0], [5.0], [6.0]])
        mask = np.array([True, True, True, False, False, False])
        _, P = ranksums_one_vs_rest(X, mask)
        assert np.isclose(P[0], 0.1)

    def test_constant_column_is_not_significant(self, separated):
        """A constant column gets p = 1 and a NaN statistic."""
        X, mask = separated
        U, P = ranksums_one_vs_rest(X, mask)

        assert P[1] == 1.0
        assert np.isnan(U[1])

    def test_empty_group(self, separated):
        """No observation in one group gives p = 1 everywhere."""
        X, _ = separated
        _, P = ranksums_one_vs_rest(X, np.ones(10, dtype=bool))
        assert np.all(P == 1.0)

        _, P = ranksums_one_vs_rest(X, np.zeros(10, dtype=bool))
        assert np.all(P == 1.0)

    def test_non_finite_column(self, separated):
        """Columns with NaN or inf are not tested."""
        X, mask = separated
        X = X.copy()
        X[0, 0] = np.nan
        _, P = ranksums_one_vs_rest(X, mask)
        assert P[0] == 1.0

    def test_ties_use_normal_approximation(self):
        """Tied values switch to the tie-corrected normal approximation."""
        x = np.array([1.0, 1.0, 2.0, 2.0, 3.0, 7.0])
        y = np.array([3.0, 4.0, 4.0, 5.0, 5.0, 6.0, 8.0])
        X = np.concatenate([x, y])[:, None]
        mask = np.array([True] * len(x) + [False] * len(y))

        U, P = ranksums_one_vs_rest(X, mask)
        expected = mannwhitneyu(x, y, alternative="two-sided", use_continuity=True, method="asymptotic")

        assert np.isclose(U[0], expected.statistic)
        assert np.isclose(P[0], expected.pvalue)

    def test_small_groups_without_ties_are_exact(self):
        """Groups below 50 observations without ties use the exact test."""
        rng = np.random.default_rng(0)
        x = rng.normal(0.0, 1.0, size=12)
        y = rng.normal(0.8, 1.0, size=30)
        X = np.concatenate([x, y])[:, None]
        mask = np.array([True] * 12 + [False] * 30)

        _, P = ranksums_one_vs_rest(X, mask)
        expected = mannwhitneyu(x, y, alternative="two-sided", method="exact")
        assert np.isclose(P[0], expected.pvalue)

    def test_large_groups_are_asymptotic(self):
        """A group of 50 or more observations uses the normal approximation."""
        rng = np.random.default_rng(1)
        x = rng.normal(0.0, 1.0, size=60)
        y = rng.normal(0.3, 1.0, size=40)
        X = np.concatenate([x, y])[:, None]
        mask = np.array([True] * 60 + [False] * 40)

        _, P = ranksums_one_vs_rest(X, mask)
        expected = mannwhitneyu(
            x, y, alternative="two-sided", use_continuity=True, method="asymptotic"
        )
        assert np.isclose(P[0], expected.pvalue)

    def test_columns_are_independent(self):
        """Each column is tested on its own."""
        rng = np.random.default_rng(2)
        X = rng.normal(size=(40, 5))
        mask = np.arange(40) < 15

        _, P_all = ranksums_one_vs_rest(X, mask)
        for j in range(5):
            _, P_one = ranksums_one_vs_rest(X[:, [j]], mask)
            assert P_one[0] == P_all[j]

    def test_shape_validation(self):
        """Mask length must match the number of rows."""
        with pytest.raises(ValueError, match="positive_mask"):
            ranksums_one_vs_rest(np.zeros((4, 2)), np.array([True, False]))

        with pytest.raises(ValueError, match="2-D"):
            ranksums_one_vs_rest(np.zeros(4), np.array([True, False, True, False]))


# =============================================================================
# Test p_adjust
# =============================================================================


class TestPAdjust:
    """Tests for multiple-testing correction."""

    P = np.array([0.01, 0.02, 0.03, 0.04, 0.05])

    def test_bh(self):
        """Values from R: p.adjust(c(.01,.02,.03,.04,.05), 'BH')."""
        assert np.allclose(p_adjust(self.P, "BH"), [0.05] * 5)

    def test_fdr_is_bh(self):
        """'fdr' is an alias of 'BH'."""
        p = np.array([0.01, 0.04, 0.03, 0.2])
        assert np.allclose(p_adjust(p, "fdr"), p_adjust(p, "BH"))
        assert np.allclose(p_adjust([0.01, 0.04, 0.03], "fdr"), [0.03, 0.04, 0.04])

    def test_by(self):
        """BY multiplies BH by the harmonic sum of 1..n."""
        q = sum(1.0 / i for i in range(1, 6))
        assert np.allclose(p_adjust(self.P, "BY"), [0.05 * q] * 5)

    def test_bonferroni(self):
        """Bonferroni multiplies by the number of tests."""
        assert np.allclose(p_adjust(self.P, "bonferroni"), [0.05, 0.10, 0.15, 0.20, 0.25])

    def test_holm(self):
        """Values from R: p.adjust(c(.01,.02,.03,.04,.05), 'holm')."""
        assert np.allclose(p_adjust(self.P, "holm"), [0.05, 0.08, 0.09, 0.09, 0.09])

    def test_hochberg(self):
        """Values from R: p.adjust(c(.01,.02,.03,.04,.05), 'hochberg')."""
        assert np.allclose(p_adjust(self.P, "hochberg"), [0.05] * 5)

    def test_hommel_bounds(self):
        """Hommel lies between the raw p-values and Hochberg."""
        adjusted = p_adjust(self.P, "hommel")
        assert np.all(adjusted >= self.P - 1e-12)
        assert np.all(adjusted <= p_adjust(self.P, "hochberg") + 1e-12)

    def test_none(self):
        """'none' returns the p-values unchanged."""
        assert np.array_equal(p_adjust(self.P, "none"), self.P)

    @pytest.mark.parametrize("method", P_ADJUST_METHODS)
    def test_at_most_one(self, method):
        """No adjusted p-value exceeds 1."""
        p = np.array([0.5, 0.9, 0.99, 0.7])
        assert np.all(p_adjust(p, method) <= 1.0)

    def test_fdr_monotone_in_rank(self):
        """BH adjusted values are non-decreasing in raw p-value rank."""
        rng = np.random.default_rng(3)
        p = rng.uniform(size=50) ** 3
        adjusted = p_adjust(p, "fdr")
        order = np.argsort(p, kind="stable")
        assert np.all(np.diff(adjusted[order]) >= -1e-15)

    def test_input_order_preserved(self):
        """Adjusted values are returned in input order."""
        p = np.array([0.04, 0.001, 0.5])
        adjusted = p_adjust(p, "bonferroni")
        assert np.allclose(adjusted, [0.12, 0.003, 1.0])

    def test_aliases(self):
        """Aliases are case-insensitive."""
        for alias in ("bh", "fdr_bh", "benjamini-hochberg", "FDR"):
            assert np.allclose(p_adjust(self.P, alias), p_adjust(self.P, "BH"))
        for alias in ("by", "fdr_by", "benjamini-yekutieli"):
            assert np.allclose(p_adjust(self.P, alias), p_adjust(self.P, "BY"))

    def test_nan_treated_as_one(self):
        """NaN p-values become 1 before adjustment."""
        assert np.allclose(p_adjust([0.01, np.nan], "bonferroni"), [0.02, 1.0])

    def test_empty(self):
        """An empty family gives an empty result."""
        assert p_adjust(np.array([]), "fdr").size == 0

    def test_invalid_method(self):
        """Unknown methods are configuration errors."""
        with pytest.raises(ConfigurationError, match="correction method"):
            p_adjust(self.P, "sidak-ish")

    def test_out_of_range(self):
        """p-values outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            p_adjust([0.5, 1.5], "fdr")
