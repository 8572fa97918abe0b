"""Candidate probability distributions for annual minimum flows.

Five families are fitted independently to the annual minimum series: Normal,
Log-Normal, Pearson type III, Log-Pearson type III and Weibull. Each family
either returns a :class:`DistributionFit` or an explicit :class:`Infeasible`
outcome; one family failing never affects the others.

Quantiles follow the frequency-factor form Q = mean + k * std (Kite, 1988) with
standard error s = (std / sqrt(n)) * sqrt(1 + k^2 / (2 * alpha)) (alpha = 1 for
the normal families) and a symmetric interval Q +/- z * s, computed in log space
and exponentiated for the log families. Weibull parameters come from a
least-squares fit on Weibull plotting positions, not maximum likelihood.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
import math

import numpy as np
from scipy import stats

from ..utils.logger import setup_logger
from .quantiles import kite_frequency_factor, normal_quantile
from .statistics import SampleStatistics, log_sample_statistics, sample_statistics

logger = setup_logger("distribution_fitting")

DEFAULT_CONFIDENCE_Z = 1.96


@dataclass(frozen=True)
class DistributionParameters:
    """Parameter set of a fitted family, in the space it was fitted in.

    Attributes:
        n: Sample size.
        mean: Sample mean (of ln(x) for log families).
        variance: Sample variance (of ln(x) for log families).
        std: Sample standard deviation (of ln(x) for log families).
        skewness: Sample skewness, None when undefined.
        alpha: Shape parameter (Pearson families, Weibull shape).
        beta: Scale parameter (Pearson families, Weibull scale).
        xi: Location parameter (Pearson families).
    """

    n: int
    mean: float
    variance: float
    std: float
    skewness: float | None
    alpha: float | None = None
    beta: float | None = None
    xi: float | None = None

    @classmethod
    def from_statistics(cls, sample: SampleStatistics, **shape) -> "DistributionParameters":
        return cls(
            n=sample.n,
            mean=sample.mean,
            variance=sample.variance,
            std=sample.std,
            skewness=sample.skewness,
            **shape,
        )


@dataclass(frozen=True)
class QuantileEstimate:
    """Quantile of a fitted family at one non-exceedance probability."""

    probability: float
    value: float
    ci_lower: float
    ci_upper: float
    standard_error: float
    k_factor: float

    @property
    def ci_width(self) -> float:
        return self.ci_upper - self.ci_lower


@dataclass(frozen=True)
class DistributionFit:
    """A successfully fitted family evaluated at the design probability."""

    name: str
    log_space: bool
    parameters: DistributionParameters
    estimate: QuantileEstimate

    @property
    def n(self) -> int:
        return self.parameters.n

    @property
    def point_estimate(self) -> float:
        return self.estimate.value

    @property
    def ci_lower(self) -> float:
        return self.estimate.ci_lower

    @property
    def ci_upper(self) -> float:
        return self.estimate.ci_upper

    @property
    def ci_width(self) -> float:
        return self.estimate.ci_width

    @property
    def standard_error(self) -> float:
        return self.estimate.standard_error

    @property
    def k_factor(self) -> float:
        return self.estimate.k_factor

    @property
    def mean(self) -> float:
        return self.parameters.mean

    @property
    def variance(self) -> float:
        return self.parameters.variance

    @property
    def skewness(self) -> float | None:
        return self.parameters.skewness

    @property
    def alpha(self) -> float | None:
        return self.parameters.alpha

    @property
    def beta(self) -> float | None:
        return self.parameters.beta

    @property
    def xi(self) -> float | None:
        return self.parameters.xi


@dataclass(frozen=True)
class Infeasible:
    """A family that could not be fitted to the sample, with the reason."""

    distribution: str
    reason: str


FitOutcome = DistributionFit | Infeasible


def _all_finite(*values: float | None) -> bool:
    return all(v is not None and math.isfinite(v) for v in values)


class FrequencyDistribution(ABC):
    """Base class of the candidate families.

    Subclasses implement :meth:`parameters`, which either returns the fitted
    :class:`DistributionParameters` or a string explaining why the family is
    infeasible, and :meth:`_quantile`, which evaluates the fitting-space
    quantile and its standard error from a parameter set. Samples with fewer
    than two values or with non-finite values never reach :meth:`parameters`.
    """

    name: str = ""
    log_space: bool = False

    @abstractmethod
    def parameters(self, values: np.ndarray) -> DistributionParameters | str:
        """Estimate the parameter set, or return the infeasibility reason."""

    @abstractmethod
    def _quantile(
        self, params: DistributionParameters, probability: float
    ) -> tuple[float, float, float]:
        """Return (quantile, standard error, k-factor) in the fitting space."""

    def _checked_parameters(self, x: np.ndarray) -> DistributionParameters | str:
        reason = _sample_reason(x)
        return reason if reason else self.parameters(x)

    def check_feasibility(self, values: Sequence[float] | np.ndarray) -> str | None:
        """Return why the family cannot be fitted to ``values``, or None."""
        result = self._checked_parameters(_as_sample(values))
        return result if isinstance(result, str) else None

    def fit(
        self,
        values: Sequence[float] | np.ndarray,
        probability: float = 0.1,
        confidence_z: float = DEFAULT_CONFIDENCE_Z,
    ) -> FitOutcome:
        """Fit the family and evaluate it at ``probability``."""
        x = _as_sample(values)
        params = self._checked_parameters(x)
        if isinstance(params, str):
            logger.info("%s infeasible: %s", self.name, params)
            return Infeasible(distribution=self.name, reason=params)

        estimate = self.estimate(params, probability, confidence_z)
        if not _all_finite(estimate.value, estimate.ci_lower, estimate.ci_upper):
            reason = f"non-finite quantile at p={probability}"
            logger.info("%s infeasible: %s", self.name, reason)
            return Infeasible(distribution=self.name, reason=reason)

        logger.debug(
            "%s: Q=%.4f [%.4f, %.4f] k=%.4f",
            self.name,
            estimate.value,
            estimate.ci_lower,
            estimate.ci_upper,
            estimate.k_factor,
        )
        return DistributionFit(
            name=self.name,
            log_space=self.log_space,
            parameters=params,
            estimate=estimate,
        )

    def estimate(
        self,
        params: DistributionParameters | DistributionFit,
        probability: float,
        confidence_z: float = DEFAULT_CONFIDENCE_Z,
    ) -> QuantileEstimate:
        """Evaluate an already fitted parameter set at another probability."""
        if isinstance(params, DistributionFit):
            params = params.parameters
        value, standard_error, k = self._quantile(params, probability)
        lower = value - confidence_z * standard_error
        upper = value + confidence_z * standard_error
        if self.log_space:
            value, lower, upper = (float(np.exp(v)) for v in (value, lower, upper))
        return QuantileEstimate(
            probability=probability,
            value=value,
            ci_lower=lower,
            ci_upper=upper,
            standard_error=standard_error,
            k_factor=k,
        )


def _as_sample(values: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _moment_standard_error(std: float, n: int, k: float, alpha: float = 1.0) -> float:
    """Standard error of a frequency-factor quantile estimate."""
    return (std / math.sqrt(n)) * math.sqrt(1.0 + (k * k) / (2.0 * alpha))


def _sample_reason(x: np.ndarray) -> str | None:
    if x.size < 2:
        return "at least 2 values are required"
    if not np.all(np.isfinite(x)):
        return "sample contains non-finite values"
    return None


def _positivity_reason(x: np.ndarray) -> str | None:
    if np.any(x <= 0):
        return "non-positive values cannot be log-transformed"
    return None


def _pearson_shape(
    sample: SampleStatistics, *, absolute_scale: bool
) -> tuple[float, float, float] | str:
    """Shape, scale and location of a Pearson type III from sample moments.

    Pearson III:      alpha = 4/g^2, beta = std*g/2,   xi = mean - 2*std/g
    Log-Pearson III:  alpha = 4/g^2, beta = std*|g|/2, xi = mean - alpha*beta
    """
    g = sample.skewness
    if g is None:
        return "skewness is undefined (zero variance or fewer than 3 values)"
    if g * g == 0.0:
        return "zero skewness leaves the shape parameter unbounded"

    alpha = 4.0 / (g * g)
    if absolute_scale:
        beta = sample.std * abs(g) / 2.0
        xi = sample.mean - alpha * beta
    else:
        beta = sample.std * g / 2.0
        xi = sample.mean - 2.0 * sample.std / g

    if not _all_finite(alpha, beta, xi):
        return f"non-finite parameters (alpha={alpha}, beta={beta}, xi={xi})"
    return alpha, beta, xi


class NormalDistribution(FrequencyDistribution):
    name = "Normal"

    def parameters(self, values: np.ndarray) -> DistributionParameters | str:
        return DistributionParameters.from_statistics(sample_statistics(values))

    def _quantile(self, params, probability):
        k = normal_quantile(probability)
        value = params.mean + k * params.std
        return value, _moment_standard_error(params.std, params.n, k), k


class LogNormalDistribution(NormalDistribution):
    name = "Log-Normal"
    log_space = True

    def parameters(self, values: np.ndarray) -> DistributionParameters | str:
        reason = _positivity_reason(values)
        if reason:
            return reason
        return DistributionParameters.from_statistics(log_sample_statistics(values))


class PearsonIIIDistribution(FrequencyDistribution):
    name = "Pearson III"

    def parameters(self, values: np.ndarray) -> DistributionParameters | str:
        sample = sample_statistics(values)
        shape = _pearson_shape(sample, absolute_scale=False)
        if isinstance(shape, str):
            return shape
        alpha, beta, xi = shape
        return DistributionParameters.from_statistics(sample, alpha=alpha, beta=beta, xi=xi)

    def _quantile(self, params, probability):
        k = kite_frequency_factor(normal_quantile(probability), params.skewness)
        value = params.mean + k * params.std
        return value, _moment_standard_error(params.std, params.n, k, params.alpha), k


class LogPearsonIIIDistribution(PearsonIIIDistribution):
    name = "Log-Pearson III"
    log_space = True

    def parameters(self, values: np.ndarray) -> DistributionParameters | str:
        reason = _positivity_reason(values)
        if reason:
            return reason
        sample = log_sample_statistics(values)
        shape = _pearson_shape(sample, absolute_scale=True)
        if isinstance(shape, str):
            return shape
        alpha, beta, xi = shape
        if alpha <= 0 or beta <= 0:
            return f"non-positive parameters (alpha={alpha}, beta={beta})"
        return DistributionParameters.from_statistics(sample, alpha=alpha, beta=beta, xi=xi)


def weibull_plotting_regression(values: Sequence[float] | np.ndarray) -> tuple[float, float] | str:
    """Estimate Weibull (shape, scale) by regression on plotting positions.

    Sorted values get F_i = i / (n + 1), i = 1..n. With Y = ln(-ln(1 - F)) and
    X = ln(x), ordinary least squares on Y = A + B*X gives shape = B and
    scale = exp(-A / B).

    Returns:
        (shape, scale), or the reason the regression is degenerate.
    """
    x = np.sort(_as_sample(values))
    reason = _positivity_reason(x)
    if reason:
        return reason

    n = x.size
    if n < 2:
        return "at least 2 values are required"
    plotting_position = np.arange(1, n + 1) / (n + 1)
    log_x = np.log(x)
    log_y = np.log(-np.log1p(-plotting_position))

    if np.ptp(log_x) == 0.0:
        return "degenerate plotting-position regression (no spread in the sample)"

    regression = stats.linregress(log_x, log_y)
    shape = float(regression.slope)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        scale = float(np.exp(-regression.intercept / shape))

    if not _all_finite(shape, scale) or shape <= 0 or scale <= 0:
        return f"invalid Weibull parameters (shape={shape}, scale={scale})"
    return shape, scale


class WeibullDistribution(FrequencyDistribution):
    name = "Weibull"

    def parameters(self, values: np.ndarray) -> DistributionParameters | str:
        fitted = weibull_plotting_regression(values)
        if isinstance(fitted, str):
            return fitted
        shape, scale = fitted
        return DistributionParameters.from_statistics(
            sample_statistics(values), alpha=shape, beta=scale
        )

    def _quantile(self, params, probability):
        with np.errstate(over="ignore", under="ignore"):
            value = params.beta * float(np.power(-math.log1p(-probability), 1.0 / params.alpha))
        # normal-equivalent frequency factor for the standard error
        k = (value - params.mean) / params.std
        return value, _moment_standard_error(params.std, params.n, k), k


DISTRIBUTIONS: tuple[FrequencyDistribution, ...] = (
    NormalDistribution(),
    LogNormalDistribution(),
    PearsonIIIDistribution(),
    LogPearsonIIIDistribution(),
    WeibullDistribution(),
)


def get_distribution(name: str) -> FrequencyDistribution:
    """Look up a candidate family by its display name."""
    for distribution in DISTRIBUTIONS:
        if distribution.name == name:
            return distribution
    raise KeyError(f"Unknown distribution: {name}")


def fit_all_distributions(
    values: Sequence[float] | np.ndarray,
    probability: float = 0.1,
    confidence_z: float = DEFAULT_CONFIDENCE_Z,
) -> tuple[list[DistributionFit], list[Infeasible]]:
    """Fit every candidate family independently.

    Returns:
        Successful fits and infeasible outcomes, each in candidate order.
    """
    fits: list[DistributionFit] = []
    infeasible: list[Infeasible] = []
    for distribution in DISTRIBUTIONS:
        outcome = distribution.fit(values, probability, confidence_z)
        if isinstance(outcome, Infeasible):
            infeasible.append(outcome)
        else:
            fits.append(outcome)

    logger.info(
        "Fitted %d of %d distributions%s",
        len(fits),
        len(DISTRIBUTIONS),
        f" (infeasible: {', '.join(o.distribution for o in infeasible)})" if infeasible else "",
    )
    return fits, infeasible
