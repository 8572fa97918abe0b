"""Best-distribution selection and diagnostic notes."""

from collections.abc import Sequence

from ..config.settings import DiagnosticsConfig
from ..errors import NoFeasibleDistributionError
from ..utils.logger import setup_logger
from .distributions import DistributionFit

logger = setup_logger("model_selection")


def select_best_fit(fits: Sequence[DistributionFit]) -> DistributionFit:
    """Return the fit with the narrowest confidence interval.

    Ties keep the earliest fit in candidate order.

    Raises:
        NoFeasibleDistributionError: If ``fits`` is empty.
    """
    if not fits:
        raise NoFeasibleDistributionError("No valid distributions found")

    best = fits[0]
    for fit in fits[1:]:
        if fit.ci_width < best.ci_width:
            best = fit

    logger.info("Best distribution: %s (CI width %.4f)", best.name, best.ci_width)
    return best


def diagnostic_notes(
    best: DistributionFit,
    n_years: int,
    zero_flow_days: int,
    year_type: str = "calendar",
    hydro_start_month: int = 1,
    diagnostics: DiagnosticsConfig | None = None,
) -> list[str]:
    """Human-readable notes on the selected fit and the series quality.

    Example:
        ["Best distribution: Log-Pearson III (narrowest CI)",
         "Series: 25 years (hydrological, start month 10)",
         "Warning: skewness g=-1.250 outside recommended range [-1.02, 2.00]"]
    """
    diagnostics = diagnostics or DiagnosticsConfig()
    notes = [f"Best distribution: {best.name} (narrowest CI)"]

    if year_type == "hydrological":
        notes.append(f"Series: {n_years} years (hydrological, start month {hydro_start_month})")
    else:
        notes.append(f"Series: {n_years} years (calendar)")

    if zero_flow_days > 0:
        notes.append(f"Warning: {zero_flow_days} days with zero flow in the record")

    skewness = best.skewness
    if skewness is not None and not (
        diagnostics.skew_lower <= skewness <= diagnostics.skew_upper
    ):
        notes.append(
            f"Warning: skewness g={skewness:.3f} outside recommended range "
            f"[{diagnostics.skew_lower:.2f}, {diagnostics.skew_upper:.2f}]"
        )

    if n_years < diagnostics.short_series_years:
        notes.append(
            f"Warning: short series (< {diagnostics.short_series_years} years). "
            "Results are less reliable"
        )
    elif n_years >= diagnostics.long_series_years:
        notes.append(
            f"Long series (>= {diagnostics.long_series_years} years). High confidence"
        )

    return notes
