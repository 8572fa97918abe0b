"""Tests for the candidate distributions."""

import math

import numpy as np
import pytest
from scipy import stats

from lowflow.frequency.distributions import (
    DISTRIBUTIONS,
    DistributionFit,
    Infeasible,
    LogNormalDistribution,
    LogPearsonIIIDistribution,
    NormalDistribution,
    PearsonIIIDistribution,
    WeibullDistribution,
    fit_all_distributions,
    get_distribution,
    weibull_plotting_regression,
)
from lowflow.frequency.quantiles import kite_frequency_factor, normal_quantile
from lowflow.frequency.statistics import log_sample_statistics


@pytest.fixture
def annual_minima():
    """Positively skewed annual minimum flows."""
    rng = np.random.default_rng(11)
    return rng.gamma(3.0, 2.0, size=30) + 0.5


def _weibull_at_plotting_positions(shape: float, scale: float, n: int) -> np.ndarray:
    positions = np.arange(1, n + 1) / (n + 1)
    return scale * (-np.log1p(-positions)) ** (1.0 / shape)


class TestNormalFamilies:
    """Test Normal and Log-Normal fits."""

    def test_normal_estimate(self, annual_minima):
        """Q = mean + z_p * std with the moment standard error."""
        fit = NormalDistribution().fit(annual_minima, 0.1)
        mean = np.mean(annual_minima)
        std = np.std(annual_minima, ddof=1)
        z = stats.norm.ppf(0.1)

        assert isinstance(fit, DistributionFit)
        assert fit.point_estimate == pytest.approx(mean + z * std, rel=1e-6)
        expected_se = std / math.sqrt(30) * math.sqrt(1 + z * z / 2)
        assert fit.standard_error == pytest.approx(expected_se, rel=1e-6)
        assert fit.ci_width == pytest.approx(2 * 1.96 * expected_se, rel=1e-6)

    def test_log_normal_estimate(self, annual_minima):
        """Log-Normal works in log space and exponentiates the bounds."""
        fit = LogNormalDistribution().fit(annual_minima, 0.1)
        logs = np.log(annual_minima)
        expected = np.exp(np.mean(logs) + stats.norm.ppf(0.1) * np.std(logs, ddof=1))

        assert fit.log_space
        assert fit.point_estimate == pytest.approx(expected, rel=1e-6)
        assert fit.mean == pytest.approx(np.mean(logs))
        assert fit.parameters.std == log_sample_statistics(annual_minima).std
        assert fit.ci_lower > 0

    def test_log_normal_rejects_zero(self):
        outcome = LogNormalDistribution().fit([0.0, 1.0, 2.0, 3.0])

        assert isinstance(outcome, Infeasible)
        assert outcome.distribution == "Log-Normal"
        assert "non-positive" in outcome.reason

    def test_constant_sample(self):
        """Zero spread gives a zero-width interval at the constant value."""
        fit = NormalDistribution().fit([10.0] * 15, 0.1)

        assert fit.point_estimate == 10.0
        assert fit.ci_width == 0.0


class TestPearsonFamilies:
    """Test Pearson type III and Log-Pearson type III fits."""

    def test_pearson_parameters(self, annual_minima):
        """Shape, scale and location follow from the sample moments."""
        fit = PearsonIIIDistribution().fit(annual_minima, 0.1)
        g = stats.skew(annual_minima, bias=False)
        mean = np.mean(annual_minima)
        std = np.std(annual_minima, ddof=1)

        assert fit.alpha == pytest.approx(4 / g**2)
        assert fit.beta == pytest.approx(std * g / 2)
        assert fit.xi == pytest.approx(mean - 2 * std / g)

        k = kite_frequency_factor(normal_quantile(0.1), fit.skewness)
        assert fit.k_factor == pytest.approx(k)
        assert fit.point_estimate == pytest.approx(mean + k * std)
        expected_se = std / math.sqrt(30) * math.sqrt(1 + k * k / (2 * fit.alpha))
        assert fit.standard_error == pytest.approx(expected_se)

    def test_zero_skew_is_infeasible(self):
        """A symmetric sample leaves alpha unbounded."""
        outcome = PearsonIIIDistribution().fit([1.0, 2.0, 3.0, 4.0, 5.0])

        assert isinstance(outcome, Infeasible)
        assert "zero skewness" in outcome.reason

    def test_near_zero_skew_uses_normal_factor(self):
        """Skewness below 1e-6 keeps the fit and falls back to k = z_p."""
        values = [float(v) for v in range(1, 10)] + [10.0 + 1e-7]
        fit = PearsonIIIDistribution().fit(values, 0.1)

        assert isinstance(fit, DistributionFit)
        assert 0 < abs(fit.skewness) < 1e-6
        assert fit.alpha > 1e12
        assert fit.k_factor == normal_quantile(0.1)
        assert math.isfinite(fit.standard_error)
        assert math.isfinite(fit.ci_lower) and math.isfinite(fit.ci_upper)
        assert fit.ci_lower <= fit.point_estimate <= fit.ci_upper

        normal = NormalDistribution().fit(values, 0.1)
        assert fit.point_estimate == pytest.approx(normal.point_estimate)
        assert fit.standard_error == pytest.approx(normal.standard_error)

    def test_constant_sample_is_infeasible(self):
        outcome = PearsonIIIDistribution().fit([4.0] * 12)

        assert isinstance(outcome, Infeasible)
        assert "undefined" in outcome.reason

    def test_log_pearson_parameters(self, annual_minima):
        """Log-Pearson uses |g| in the scale and xi = mean - alpha * beta."""
        fit = LogPearsonIIIDistribution().fit(annual_minima, 0.1)
        logs = np.log(annual_minima)
        g = stats.skew(logs, bias=False)
        std = np.std(logs, ddof=1)

        assert fit.log_space
        assert fit.beta == pytest.approx(std * abs(g) / 2)
        assert fit.xi == pytest.approx(np.mean(logs) - fit.alpha * fit.beta)
        assert fit.beta > 0

    def test_log_pearson_rejects_zero(self):
        outcome = LogPearsonIIIDistribution().fit([0.0, 1.0, 2.0, 5.0])

        assert isinstance(outcome, Infeasible)


class TestWeibull:
    """Test the plotting-position Weibull fit."""

    def test_exact_plotting_positions(self):
        """Values placed exactly at the plotting positions recover the parameters."""
        values = _weibull_at_plotting_positions(shape=2.0, scale=10.0, n=20)
        shape, scale = weibull_plotting_regression(values)

        assert shape == pytest.approx(2.0, rel=1e-9)
        assert scale == pytest.approx(10.0, rel=1e-9)

    def test_order_independent(self):
        """The sample is sorted before assigning plotting positions."""
        values = _weibull_at_plotting_positions(shape=1.5, scale=4.0, n=15)
        shuffled = np.random.default_rng(5).permutation(values)

        assert weibull_plotting_regression(shuffled) == pytest.approx(
            weibull_plotting_regression(values)
        )

    def test_large_random_sample(self):
        """A large Weibull sample gives parameters close to the true ones."""
        rng = np.random.default_rng(42)
        values = 20.0 * rng.weibull(1.5, size=5000)
        shape, scale = weibull_plotting_regression(values)

        assert shape == pytest.approx(1.5, rel=0.1)
        assert scale == pytest.approx(20.0, rel=0.1)

    def test_quantile(self):
        """Q(p) = scale * (-ln(1 - p))^(1 / shape)."""
        values = _weibull_at_plotting_positions(shape=2.0, scale=10.0, n=20)
        fit = WeibullDistribution().fit(values, 0.1)

        assert fit.alpha == pytest.approx(2.0)
        assert fit.beta == pytest.approx(10.0)
        assert fit.point_estimate == pytest.approx(10.0 * (-math.log(0.9)) ** 0.5)

    def test_degenerate_samples(self):
        """Non-positive or constant samples cannot be fitted."""
        assert isinstance(WeibullDistribution().fit([0.0, 1.0, 2.0]), Infeasible)
        assert isinstance(WeibullDistribution().fit([3.0] * 10), Infeasible)


class TestFitAllDistributions:
    """Test fitting every family independently."""

    def test_candidate_order(self, annual_minima):
        fits, infeasible = fit_all_distributions(annual_minima, 0.1)

        assert [f.name for f in fits] == [d.name for d in DISTRIBUTIONS]
        assert infeasible == []

    def test_zero_value_excludes_log_families(self, annual_minima):
        """A zero minimum only removes the families that need logarithms."""
        values = np.append(annual_minima, 0.0)
        fits, infeasible = fit_all_distributions(values, 0.1)

        assert [f.name for f in fits] == ["Normal", "Pearson III"]
        assert [o.distribution for o in infeasible] == ["Log-Normal", "Log-Pearson III", "Weibull"]

    def test_interval_contains_estimate(self):
        """Every fit satisfies ci_lower <= estimate <= ci_upper."""
        rng = np.random.default_rng(1)
        samples = [
            rng.gamma(2.0, 3.0, size=12) + 0.1,
            rng.lognormal(1.0, 0.8, size=25),
            20.0 * rng.weibull(0.9, size=40),
            rng.normal(50.0, 5.0, size=15),
        ]
        for values in samples:
            for probability in (0.5, 0.1, 0.01):
                fits, _ = fit_all_distributions(values, probability)
                for fit in fits:
                    assert fit.ci_lower <= fit.point_estimate <= fit.ci_upper, fit.name

    def test_too_few_values(self):
        """A single value is infeasible for every family."""
        fits, infeasible = fit_all_distributions([5.0])

        assert fits == []
        assert len(infeasible) == len(DISTRIBUTIONS)


class TestEstimate:
    """Test reuse of fitted parameters."""

    def test_estimate_reuses_fit(self, annual_minima):
        """Re-evaluating at the fitted probability reproduces the fit."""
        for distribution in DISTRIBUTIONS:
            fit = distribution.fit(annual_minima, 0.1)
            assert distribution.estimate(fit, 0.1) == fit.estimate

    def test_get_distribution(self):
        assert get_distribution("Log-Pearson III").name == "Log-Pearson III"
        with pytest.raises(KeyError):
            get_distribution("Gumbel")

    def test_check_feasibility(self):
        assert NormalDistribution().check_feasibility([1.0, 2.0, 4.0]) is None
        assert LogNormalDistribution().check_feasibility([-1.0, 2.0, 4.0]) is not None


class TestCheckFeasibility:
    """Test the standalone feasibility predicate."""

    @pytest.mark.parametrize("distribution", DISTRIBUTIONS, ids=lambda d: d.name)
    @pytest.mark.parametrize("values", [[5.0], []], ids=["single", "empty"])
    def test_too_few_values(self, distribution, values):
        """Short samples give the same reason as fit, without raising."""
        reason = distribution.check_feasibility(values)

        assert reason == "at least 2 values are required"
        assert distribution.fit(values) == Infeasible(distribution.name, reason)

    @pytest.mark.parametrize("distribution", DISTRIBUTIONS, ids=lambda d: d.name)
    def test_non_finite_values(self, distribution):
        reason = distribution.check_feasibility([1.0, np.nan, 3.0, 4.0])

        assert reason == "sample contains non-finite values"

    @pytest.mark.parametrize("distribution", DISTRIBUTIONS, ids=lambda d: d.name)
    def test_feasible_sample(self, distribution, annual_minima):
        assert distribution.check_feasibility(annual_minima) is None
