"""Assembly of gap-aware daily discharge series.

Raw station records arrive as scattered (date, flow) rows. This module turns
them into one entry per calendar day between the first and last observation,
keeping missing days explicit instead of silently closing the gaps.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
import datetime as dt
from typing import Any

import numpy as np
import pandas as pd

from ..errors import InsufficientDataError
from ..utils.logger import setup_logger

logger = setup_logger("series_assembly")

DateLike = str | dt.date | pd.Timestamp
FlowRecords = pd.Series | pd.DataFrame | Iterable[Mapping[str, Any] | tuple[Any, Any]]


@dataclass(frozen=True)
class DailyPoint:
    """One calendar day of the assembled series.

    Attributes:
        date: Calendar day.
        flow: Observed discharge, or None when the day has no observation.
    """

    date: dt.date
    flow: float | None

    @property
    def is_valid(self) -> bool:
        """True when a flow was observed (zero flow is a valid observation)."""
        return self.flow is not None


@dataclass(frozen=True)
class DailySeries:
    """Contiguous daily discharge sequence with explicit gaps.

    Attributes:
        flows: Float series on a daily DatetimeIndex; NaN marks a missing day.
    """

    flows: pd.Series

    def __len__(self) -> int:
        return len(self.flows)

    @property
    def start(self) -> dt.date:
        return self.flows.index[0].date()

    @property
    def end(self) -> dt.date:
        return self.flows.index[-1].date()

    @property
    def valid_mask(self) -> np.ndarray:
        """Boolean array, True where the day carries an observation."""
        return self.flows.notna().to_numpy()

    @property
    def valid_days(self) -> int:
        return int(self.valid_mask.sum())

    @property
    def zero_flow_days(self) -> int:
        """Number of observed days with exactly zero discharge."""
        return int((self.flows == 0.0).sum())

    def points(self) -> Iterator[DailyPoint]:
        """Iterate over the series as :class:`DailyPoint` values."""
        for timestamp, value in self.flows.items():
            flow = None if pd.isna(value) else float(value)
            yield DailyPoint(date=timestamp.date(), flow=flow)


def _records_to_series(records: FlowRecords) -> pd.Series:
    """Normalize supported record containers into a raw date -> flow series."""
    if isinstance(records, pd.Series):
        raw = records.copy()
    elif isinstance(records, pd.DataFrame):
        missing = {"date", "flow"} - set(records.columns)
        if missing:
            raise ValueError(f"Flow records are missing columns: {sorted(missing)}")
        raw = pd.Series(records["flow"].to_numpy(), index=records["date"].to_numpy())
    else:
        rows = [
            (row["date"], row.get("flow")) if isinstance(row, Mapping) else tuple(row)
            for row in records
        ]
        if not rows:
            return pd.Series(dtype=float, index=pd.DatetimeIndex([]))
        dates, flows = zip(*rows, strict=True)
        raw = pd.Series(list(flows), index=list(dates))

    raw.index = pd.DatetimeIndex(pd.to_datetime(raw.index)).normalize()
    return pd.to_numeric(raw, errors="raise").astype(float)


def assemble_daily_series(
    records: FlowRecords,
    start_date: DateLike | None = None,
    end_date: DateLike | None = None,
) -> DailySeries:
    """Build a day-by-day series spanning the observed period.

    Rows with an absent flow are not observations. When the same date occurs
    more than once, the last row wins.

    Args:
        records: ``{"date", "flow"}`` mappings, ``(date, flow)`` tuples, a
            DataFrame with ``date``/``flow`` columns, or a date-indexed Series.
        start_date: Optional inclusive lower bound on observation dates.
        end_date: Optional inclusive upper bound on observation dates.

    Returns:
        DailySeries from the first to the last observed date, inclusive.

    Raises:
        InsufficientDataError: If no observation remains after filtering.
    """
    raw = _records_to_series(records)
    raw = raw[np.isfinite(raw.to_numpy())]
    raw = raw[~raw.index.duplicated(keep="last")].sort_index()

    if start_date is not None:
        raw = raw[raw.index >= pd.Timestamp(start_date)]
    if end_date is not None:
        raw = raw[raw.index <= pd.Timestamp(end_date)]

    if raw.empty:
        raise InsufficientDataError("No valid flow data found")

    full_index = pd.date_range(raw.index[0], raw.index[-1], freq="D")
    flows = raw.reindex(full_index)

    series = DailySeries(flows=flows)
    logger.debug(
        "Assembled %d days (%d observed, %d missing) from %s to %s",
        len(series),
        series.valid_days,
        len(series) - series.valid_days,
        series.start,
        series.end,
    )
    return series


def require_min_days(series: DailySeries, min_days: int = 365) -> None:
    """Raise when the assembled series covers fewer than ``min_days`` days."""
    if len(series) < min_days:
        raise InsufficientDataError(
            f"Insufficient data. Need at least {min_days} days. Found {len(series)} days"
        )
