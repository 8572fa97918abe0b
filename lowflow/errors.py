"""Fatal error conditions of the Q7,10 pipeline.

Every stage raises a subclass of :class:`Q710Error`; the pipeline driver turns
the first one into a :class:`lowflow.pipeline.Q710Failure`. Per-distribution
infeasibility is not an error, see :class:`lowflow.frequency.distributions.Infeasible`.
"""


class Q710Error(ValueError):
    """Base class for conditions that abort a Q7,10 run."""

    code = "q710_error"


class InsufficientDataError(Q710Error):
    """The raw series is empty or shorter than the minimum number of days."""

    code = "insufficient_data"


class NoCompleteWindowsError(Q710Error):
    """No gap-free moving window exists in the daily series."""

    code = "no_complete_windows"


class NoAnnualValuesError(Q710Error):
    """No window could be assigned to a year."""

    code = "no_annual_values"


class InsufficientYearsError(Q710Error):
    """Fewer distinct annual minima than the analysis requires."""

    code = "insufficient_years"


class NoFeasibleDistributionError(Q710Error):
    """Every candidate distribution was infeasible for the sample."""

    code = "no_feasible_distribution"


__all__ = [
    "Q710Error",
    "InsufficientDataError",
    "NoCompleteWindowsError",
    "NoAnnualValuesError",
    "InsufficientYearsError",
    "NoFeasibleDistributionError",
]
