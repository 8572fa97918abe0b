"""Return-period curves for fitted distributions."""

from collections.abc import Sequence
from dataclasses import dataclass

from ..config.settings import STANDARD_RETURN_PERIODS
from .distributions import DEFAULT_CONFIDENCE_Z, DistributionFit, get_distribution


@dataclass(frozen=True)
class ReturnPeriodPoint:
    """Quantile and confidence bounds for one return period (years)."""

    return_period: float
    value: float
    ci_lower: float
    ci_upper: float


def return_period_curve(
    fit: DistributionFit,
    return_periods: Sequence[float] = STANDARD_RETURN_PERIODS,
    confidence_z: float = DEFAULT_CONFIDENCE_Z,
) -> list[ReturnPeriodPoint]:
    """Evaluate one fitted distribution at every return period (p = 1/T).

    The fitted parameter set is reused as is; nothing is refitted.
    """
    distribution = get_distribution(fit.name)
    points = []
    for period in return_periods:
        estimate = distribution.estimate(fit, 1.0 / period, confidence_z)
        points.append(
            ReturnPeriodPoint(
                return_period=period,
                value=estimate.value,
                ci_lower=estimate.ci_lower,
                ci_upper=estimate.ci_upper,
            )
        )
    return points


def return_period_curves(
    fits: Sequence[DistributionFit],
    return_periods: Sequence[float] = STANDARD_RETURN_PERIODS,
    confidence_z: float = DEFAULT_CONFIDENCE_Z,
) -> dict[str, list[ReturnPeriodPoint]]:
    """Curves for all fitted distributions, keyed by distribution name."""
    return {fit.name: return_period_curve(fit, return_periods, confidence_z) for fit in fits}
