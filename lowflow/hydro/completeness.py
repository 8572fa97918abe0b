"""Completeness policy for raw discharge records.

Months or years with too many failure days (absent or zero flow) are removed
before the daily series is assembled. The removed periods then surface as gaps,
so no moving window can straddle them.
"""

from typing import Literal

import pandas as pd

from ..errors import InsufficientDataError
from ..utils.logger import setup_logger
from .series import DateLike, FlowRecords, _records_to_series

logger = setup_logger("completeness_filter")

CompletenessMode = Literal["none", "monthly", "annually"]

_PERIOD_FREQ = {"monthly": "M", "annually": "Y"}


def _clip_dates(
    raw: pd.Series, start_date: DateLike | None, end_date: DateLike | None
) -> pd.Series:
    if start_date is not None:
        raw = raw[raw.index >= pd.Timestamp(start_date)]
    if end_date is not None:
        raw = raw[raw.index <= pd.Timestamp(end_date)]
    return raw


def analyze_completeness(
    records: FlowRecords,
    mode: Literal["monthly", "annually"],
    max_failure_percentage: float,
    start_date: DateLike | None = None,
    end_date: DateLike | None = None,
) -> pd.DataFrame:
    """Tabulate failure statistics per month or per year.

    Args:
        records: Raw flow records (rows with absent flow count as null days).
        mode: ``"monthly"`` or ``"annually"`` grouping.
        max_failure_percentage: Highest failure percentage a period may have
            and still be included (0-100).
        start_date: Optional inclusive lower bound.
        end_date: Optional inclusive upper bound.

    Returns:
        DataFrame indexed by period with columns ``total_days``, ``valid_days``,
        ``null_days``, ``zero_days``, ``failure_days``, ``failure_percentage``
        and ``is_included``.
    """
    if mode not in _PERIOD_FREQ:
        raise ValueError(f"Invalid completeness mode: {mode}")
    if not 0 <= max_failure_percentage <= 100:
        raise ValueError("max_failure_percentage must be between 0 and 100")

    raw = _clip_dates(_records_to_series(records), start_date, end_date)
    if raw.empty:
        raise InsufficientDataError("No data found for the requested period")

    flags = pd.DataFrame(
        {"null_days": raw.isna().to_numpy(), "zero_days": raw.eq(0.0).to_numpy()},
        index=raw.index.to_period(_PERIOD_FREQ[mode]),
    )
    grouped = flags.groupby(level=0)

    table = grouped.sum().astype(int)
    table.insert(0, "total_days", grouped.size())
    table["failure_days"] = table["null_days"] + table["zero_days"]
    table["valid_days"] = table["total_days"] - table["failure_days"]
    table["failure_percentage"] = table["failure_days"] / table["total_days"] * 100
    table["is_included"] = table["failure_percentage"] <= max_failure_percentage
    table.index.name = "period"
    return table


def apply_completeness_policy(
    records: FlowRecords,
    mode: CompletenessMode = "none",
    max_failure_percentage: float | None = None,
    start_date: DateLike | None = None,
    end_date: DateLike | None = None,
) -> pd.Series:
    """Return the observations that survive the completeness policy.

    With ``mode="none"`` every present flow is kept, zeros included. With
    ``"monthly"`` or ``"annually"`` only periods whose failure percentage is
    within the threshold are kept, and only their strictly positive flows.

    Raises:
        ValueError: On an unknown mode or a missing/out-of-range threshold.
        InsufficientDataError: If no period passes the policy.
    """
    raw = _clip_dates(_records_to_series(records), start_date, end_date)
    if mode == "none":
        return raw.dropna()

    if max_failure_percentage is None:
        raise ValueError("max_failure_percentage is required when filtering is enabled")

    table = analyze_completeness(raw, mode, max_failure_percentage)
    included = table.index[table["is_included"].to_numpy()]
    logger.info(
        "Completeness filter (%s, <= %.1f%% failures): %d of %d periods included",
        mode,
        max_failure_percentage,
        len(included),
        len(table),
    )
    if len(included) == 0:
        raise InsufficientDataError(
            f"No period passed the {max_failure_percentage}% failure criterion ({mode} mode)"
        )

    in_period = raw.index.to_period(_PERIOD_FREQ[mode]).isin(included)
    kept = raw[in_period & (raw > 0.0).to_numpy()]
    if kept.empty:
        raise InsufficientDataError(f"No valid flow left after the {mode} filter")
    return kept
