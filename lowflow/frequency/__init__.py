"""Low-flow frequency analysis.

Sample moments, normal quantiles and frequency factors, the five candidate
distributions, best-fit selection and return-period curves.
"""

from .curves import ReturnPeriodPoint, return_period_curve, return_period_curves
from .distributions import (
    DISTRIBUTIONS,
    DistributionFit,
    DistributionParameters,
    FrequencyDistribution,
    Infeasible,
    LogNormalDistribution,
    LogPearsonIIIDistribution,
    NormalDistribution,
    PearsonIIIDistribution,
    QuantileEstimate,
    WeibullDistribution,
    fit_all_distributions,
    get_distribution,
    weibull_plotting_regression,
)
from .quantiles import kite_frequency_factor, normal_quantile
from .selection import diagnostic_notes, select_best_fit
from .statistics import SampleStatistics, log_sample_statistics, sample_statistics

__all__ = [
    "SampleStatistics",
    "sample_statistics",
    "log_sample_statistics",
    "normal_quantile",
    "kite_frequency_factor",
    "DistributionParameters",
    "QuantileEstimate",
    "DistributionFit",
    "Infeasible",
    "FrequencyDistribution",
    "NormalDistribution",
    "LogNormalDistribution",
    "PearsonIIIDistribution",
    "LogPearsonIIIDistribution",
    "WeibullDistribution",
    "DISTRIBUTIONS",
    "get_distribution",
    "fit_all_distributions",
    "weibull_plotting_regression",
    "select_best_fit",
    "diagnostic_notes",
    "ReturnPeriodPoint",
    "return_period_curve",
    "return_period_curves",
]
