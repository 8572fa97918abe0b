"""Sample moments of annual minimum series."""

from collections.abc import Sequence
from dataclasses import dataclass
import math

import numpy as np

from ..utils.logger import setup_logger

logger = setup_logger("sample_statistics")

_MIN_RECOMMENDED_SIZE = 10


@dataclass(frozen=True)
class SampleStatistics:
    """Unbiased sample moments.

    Attributes:
        n: Sample size.
        mean: Arithmetic mean.
        variance: Variance with the (n - 1) denominator.
        std: Square root of ``variance``.
        skewness: n * sum((x - mean)^3) / ((n - 1)(n - 2) std^3); None when
            n < 3 or the sample has zero spread.
    """

    n: int
    mean: float
    variance: float
    std: float
    skewness: float | None


def sample_statistics(values: Sequence[float] | np.ndarray) -> SampleStatistics:
    """Compute mean, variance and skewness with unbiased estimators.

    Args:
        values: Sample values (at least two).

    Returns:
        SampleStatistics for the sample.
    """
    x = np.asarray(values, dtype=float)
    n = x.size
    if n < 2:
        raise ValueError(f"At least 2 values are required, got {n}")
    if n < _MIN_RECOMMENDED_SIZE:
        logger.warning("Sample of %d values is short; moments are unreliable", n)

    # constant samples: avoid rounding noise from the summation
    mean = float(x[0]) if np.all(x == x[0]) else float(x.mean())
    deviations = x - mean
    variance = float(np.sum(deviations**2) / (n - 1))
    std = math.sqrt(variance)

    skewness = None
    if n >= 3 and std > 0:
        m3 = float(np.sum(deviations**3))
        skewness = (n * m3) / ((n - 1) * (n - 2) * std * std * std)

    return SampleStatistics(n=n, mean=mean, variance=variance, std=std, skewness=skewness)


def log_sample_statistics(values: Sequence[float] | np.ndarray) -> SampleStatistics:
    """Moments of the natural logarithm of a strictly positive sample."""
    x = np.asarray(values, dtype=float)
    if np.any(x <= 0):
        raise ValueError("Log-space statistics require strictly positive values")
    return sample_statistics(np.log(x))
