"""Q7,10 pipeline: daily flow records in, frequency analysis result out.

The stages run strictly forward:

    completeness policy -> daily series -> moving windows -> annual minima
    -> distribution fits -> best fit -> return-period curves

The first fatal condition stops the run and is returned as a
:class:`Q710Failure`; an infeasible distribution only removes that family
from the result.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
import datetime as dt
from typing import Any

from tqdm import tqdm

from .config.settings import Settings
from .errors import Q710Error
from .frequency.curves import ReturnPeriodPoint, return_period_curves
from .frequency.distributions import DistributionFit, Infeasible, fit_all_distributions
from .frequency.selection import diagnostic_notes, select_best_fit
from .hydro.annual import AnnualMinimum, annual_minima, require_min_years
from .hydro.completeness import apply_completeness_policy
from .hydro.series import DateLike, FlowRecords, assemble_daily_series, require_min_days
from .hydro.windows import moving_window_means
from .utils.logger import setup_logger

logger = setup_logger("q710_pipeline")

METHOD_NOTE = "Kite (1988) - SisCAH/USGS methodology"

# Output rounding: flows and quantiles / parameters and frequency factors
FLOW_DECIMALS = 4
PARAMETER_DECIMALS = 6


def _round(value: float | None, digits: int) -> float | None:
    return None if value is None else round(float(value), digits)


def fit_to_dict(fit: DistributionFit) -> dict[str, Any]:
    """Serialize a distribution fit with the output rounding policy."""
    return {
        "distribution": fit.name,
        "n": fit.n,
        "point_estimate": _round(fit.point_estimate, FLOW_DECIMALS),
        "ci_lower": _round(fit.ci_lower, FLOW_DECIMALS),
        "ci_upper": _round(fit.ci_upper, FLOW_DECIMALS),
        "ci_width": _round(fit.ci_width, FLOW_DECIMALS),
        "standard_error": _round(fit.standard_error, PARAMETER_DECIMALS),
        "mean": _round(fit.mean, PARAMETER_DECIMALS),
        "variance": _round(fit.variance, PARAMETER_DECIMALS),
        "skewness": _round(fit.skewness, PARAMETER_DECIMALS),
        "alpha": _round(fit.alpha, PARAMETER_DECIMALS),
        "beta": _round(fit.beta, PARAMETER_DECIMALS),
        "xi": _round(fit.xi, PARAMETER_DECIMALS),
        "k_factor": _round(fit.k_factor, PARAMETER_DECIMALS),
        "log_space": fit.log_space,
    }


def _curve_to_list(points: list[ReturnPeriodPoint]) -> list[dict[str, float]]:
    return [
        {
            "return_period": point.return_period,
            "value": _round(point.value, FLOW_DECIMALS),
            "ci_lower": _round(point.ci_lower, FLOW_DECIMALS),
            "ci_upper": _round(point.ci_upper, FLOW_DECIMALS),
        }
        for point in points
    ]


@dataclass(frozen=True)
class Q710Result:
    """Complete Q7,10 analysis of one station."""

    station_id: str
    period_start: dt.date
    period_end: dt.date
    year_count: int
    zero_flow_day_count: int
    annual_minima: tuple[AnnualMinimum, ...]
    best_fit: DistributionFit
    all_fits: tuple[DistributionFit, ...]
    infeasible: tuple[Infeasible, ...]
    return_period_curves: Mapping[str, list[ReturnPeriodPoint]]
    method_note: str = METHOD_NOTE
    diagnostic_notes: tuple[str, ...] = field(default_factory=tuple)

    ok = True

    @property
    def q710(self) -> float:
        """Point estimate of the selected distribution."""
        return self.best_fit.point_estimate

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result (flows to 4 decimals, parameters to 6)."""
        return {
            "station_id": self.station_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "year_count": self.year_count,
            "zero_flow_day_count": self.zero_flow_day_count,
            "annual_minima": [
                {"year": m.year, "value": _round(m.value, FLOW_DECIMALS)}
                for m in self.annual_minima
            ],
            "best_fit": fit_to_dict(self.best_fit),
            "all_fits": [fit_to_dict(fit) for fit in self.all_fits],
            "infeasible": [
                {"distribution": o.distribution, "reason": o.reason} for o in self.infeasible
            ],
            "return_period_curves": {
                name: _curve_to_list(points)
                for name, points in self.return_period_curves.items()
            },
            "method_note": self.method_note,
            "diagnostic_notes": list(self.diagnostic_notes),
        }


@dataclass(frozen=True)
class Q710Failure:
    """Fatal outcome of a Q7,10 run.

    Attributes:
        station_id: Station the run was for.
        error: Stable error code (see :mod:`lowflow.errors`).
        message: Human-readable description.
    """

    station_id: str
    error: str
    message: str

    ok = False

    def to_dict(self) -> dict[str, Any]:
        return {"station_id": self.station_id, "error": self.error, "message": self.message}


Q710Outcome = Q710Result | Q710Failure


def calculate_q710(
    records: FlowRecords,
    station_id: str,
    settings: Settings | None = None,
    start_date: DateLike | None = None,
    end_date: DateLike | None = None,
) -> Q710Outcome:
    """Compute Q7,10 for one station.

    Args:
        records: Daily flow records for the station, ``{"date", "flow"}``
            mappings or any container accepted by
            :func:`lowflow.hydro.series.assemble_daily_series`.
        station_id: Station identifier, echoed in the result.
        settings: Analysis settings; defaults to :class:`Settings()`.
        start_date: Optional inclusive lower bound on the record.
        end_date: Optional inclusive upper bound on the record.

    Returns:
        Q710Result on success, Q710Failure on the first fatal condition.

    Raises:
        ValueError: If ``station_id`` is empty.

    Example:
        >>> outcome = calculate_q710(records, "56425000")
        >>> if outcome.ok:
        ...     print(outcome.best_fit.name, outcome.q710)
    """
    if not station_id or not station_id.strip():
        raise ValueError("Station ID is required")

    settings = settings or Settings()
    analysis = settings.analysis
    preprocessing = settings.preprocessing

    try:
        observations = apply_completeness_policy(
            records,
            preprocessing.mode,
            preprocessing.max_failure_percentage,
            start_date,
            end_date,
        )
        series = assemble_daily_series(observations)
        require_min_days(series, analysis.min_days)

        windows = moving_window_means(series, analysis.window_size)
        minima = annual_minima(windows, analysis.year_type, analysis.hydro_start_month)
        require_min_years(minima, analysis.min_years)

        fits, infeasible = fit_all_distributions(
            [m.value for m in minima],
            analysis.target_probability,
            analysis.confidence_z,
        )
        best = select_best_fit(fits)
    except Q710Error as e:
        logger.warning("Q7,10 failed for station %s: %s", station_id, e)
        return Q710Failure(station_id=station_id, error=e.code, message=str(e))

    notes = diagnostic_notes(
        best,
        n_years=len(minima),
        zero_flow_days=series.zero_flow_days,
        year_type=analysis.year_type,
        hydro_start_month=analysis.hydro_start_month,
        diagnostics=settings.diagnostics,
    )
    curves = return_period_curves(fits, analysis.return_periods, analysis.confidence_z)

    logger.info(
        "Station %s: Q7,10 = %.4f (%s, %d years)",
        station_id,
        best.point_estimate,
        best.name,
        len(minima),
    )
    return Q710Result(
        station_id=station_id,
        period_start=series.start,
        period_end=series.end,
        year_count=len(minima),
        zero_flow_day_count=series.zero_flow_days,
        annual_minima=tuple(minima),
        best_fit=best,
        all_fits=tuple(fits),
        infeasible=tuple(infeasible),
        return_period_curves=curves,
        diagnostic_notes=tuple(notes),
    )


def calculate_q710_batch(
    records_by_station: Mapping[str, FlowRecords],
    settings: Settings | None = None,
    show_progress: bool = True,
) -> dict[str, Q710Outcome]:
    """Run :func:`calculate_q710` for several stations, one after another.

    A fatal condition at one station is recorded as its Q710Failure and does
    not stop the others.

    Args:
        records_by_station: Mapping of station id -> flow records.
        settings: Shared analysis settings.
        show_progress: Show a progress bar.

    Returns:
        Mapping of station id -> outcome, in input order.
    """
    outcomes: dict[str, Q710Outcome] = {}
    for station_id, records in tqdm(
        records_by_station.items(),
        total=len(records_by_station),
        desc="Calculating Q7,10",
        disable=not show_progress,
    ):
        outcomes[station_id] = calculate_q710(records, station_id, settings)

    failed = sum(1 for outcome in outcomes.values() if not outcome.ok)
    logger.info(
        "Q7,10 batch complete: %d successful, %d failed", len(outcomes) - failed, failed
    )
    return outcomes
