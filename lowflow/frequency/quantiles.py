"""Standard normal quantiles and Pearson type III frequency factors."""

import math

from ..utils.logger import setup_logger

logger = setup_logger("frequency_factors")

# Beasley-Springer (1977) central-region coefficients
_A = (2.50662823884, -18.61500062529, 41.39119773534, -25.44106049637)
_B = (-8.47351093090, 23.08336743743, -21.06224101826, 3.13082909833)
# Moro (1995) tail coefficients
_C = (
    0.3374754822726147,
    0.9761690190917186,
    0.1607979714918209,
    0.0276438810333863,
    0.0038405729373609,
    0.0003951896511919,
    0.0000321767881768,
    0.0000002888167364,
    0.0000003960315187,
)

SKEW_TOLERANCE = 1e-6


def normal_quantile(p: float) -> float:
    """Return z such that P(Z <= z) = p for the standard normal distribution.

    Beasley-Springer-Moro approximation: a rational function for
    |p - 0.5| < 0.42 and a Chebyshev-type polynomial in ln(-ln(.)) for the
    tails. Absolute error is about 3e-9 for 1e-3 < p < 1 - 1e-3.

    Args:
        p: Non-exceedance probability, strictly between 0 and 1.

    Raises:
        ValueError: If ``p`` is outside (0, 1).
    """
    if not 0.0 < p < 1.0:
        raise ValueError(f"Probability must be between 0 and 1, got {p}")

    y = p - 0.5
    if abs(y) < 0.42:
        r = y * y
        num = y * (((_A[3] * r + _A[2]) * r + _A[1]) * r + _A[0])
        den = (((_B[3] * r + _B[2]) * r + _B[1]) * r + _B[0]) * r + 1.0
        z = num / den
    else:
        r = 1.0 - p if y > 0 else p
        s = math.log(-math.log(r))
        z = _C[8]
        for c in reversed(_C[:8]):
            z = z * s + c
        if y < 0:
            z = -z

    logger.debug("normal_quantile(p=%s) = %s", p, z)
    return z


def kite_frequency_factor(z_p: float, skewness: float) -> float:
    """Pearson type III frequency factor by Kite's cubic approximation.

    k = (2/g) * [(1 + g*z/6 - (g^2/36)*(z^2 - 1))^3 - 1]

    Falls back to ``k = z_p`` (the normal case) when |skewness| < 1e-6.
    """
    if abs(skewness) < SKEW_TOLERANCE:
        logger.debug("kite_frequency_factor: skewness %s ~ 0, k = z_p = %s", skewness, z_p)
        return z_p

    term = 1.0 + skewness * z_p / 6.0 - (skewness * skewness / 36.0) * (z_p * z_p - 1.0)
    k = (2.0 / skewness) * (term * term * term - 1.0)
    logger.debug("kite_frequency_factor(z_p=%s, skewness=%s) = %s", z_p, skewness, k)
    return k
