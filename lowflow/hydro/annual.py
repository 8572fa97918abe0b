"""Annual minimum extraction for calendar or hydrological years."""

from collections.abc import Sequence
from dataclasses import dataclass
import datetime as dt
from typing import Literal

import pandas as pd

from ..errors import InsufficientYearsError, NoAnnualValuesError
from ..utils.logger import setup_logger
from .windows import WindowValue

logger = setup_logger("annual_minima")

YearType = Literal["calendar", "hydrological"]


@dataclass(frozen=True)
class AnnualMinimum:
    """Smallest window mean observed in one (calendar or hydrological) year."""

    year: int
    value: float


def assign_year(
    end_date: dt.date,
    year_type: YearType = "calendar",
    hydro_start_month: int = 1,
) -> int:
    """Return the year a window ending on ``end_date`` belongs to.

    For hydrological years, a window ending before ``hydro_start_month`` belongs
    to the previous year (e.g. with an October start, March 2011 -> 2010).
    """
    if year_type not in ("calendar", "hydrological"):
        raise ValueError(f"Invalid year_type: {year_type}")
    if not 1 <= hydro_start_month <= 12:
        raise ValueError(f"hydro_start_month must be in 1..12, got {hydro_start_month}")
    if year_type == "hydrological" and end_date.month < hydro_start_month:
        return end_date.year - 1
    return end_date.year


def annual_minima(
    windows: Sequence[WindowValue],
    year_type: YearType = "calendar",
    hydro_start_month: int = 1,
) -> list[AnnualMinimum]:
    """Reduce window means to one minimum per year key.

    Args:
        windows: Accepted moving windows.
        year_type: ``"calendar"`` or ``"hydrological"``.
        hydro_start_month: First month of the hydrological year (1-12).

    Returns:
        Annual minima sorted by year.

    Raises:
        NoAnnualValuesError: If no window was supplied.
    """
    if not windows:
        raise NoAnnualValuesError("Could not calculate annual minimum values")

    frame = pd.DataFrame(
        {
            "year": [assign_year(w.end_date, year_type, hydro_start_month) for w in windows],
            "mean": [w.mean for w in windows],
        }
    )
    minima = frame.groupby("year", sort=True)["mean"].min()

    return [AnnualMinimum(year=int(year), value=float(value)) for year, value in minima.items()]


def require_min_years(minima: Sequence[AnnualMinimum], min_years: int = 10) -> None:
    """Raise when fewer than ``min_years`` annual minima are available."""
    if len(minima) < min_years:
        raise InsufficientYearsError(
            f"Insufficient years for Q7,10. Need at least {min_years} years. "
            f"Found {len(minima)} years"
        )
    logger.debug("Annual series spans %d years", len(minima))
