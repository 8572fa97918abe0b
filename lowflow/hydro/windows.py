"""Moving-window mean flows (Q7 when the window is seven days).

A window is accepted only when every day in it carries an observation; the
mean always divides by the window size, so zero-flow days weigh fully.
"""

from dataclasses import dataclass
import datetime as dt

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..errors import NoCompleteWindowsError
from ..utils.logger import setup_logger
from .series import DailySeries

logger = setup_logger("moving_windows")


@dataclass(frozen=True)
class WindowValue:
    """Mean flow over one gap-free window."""

    start_date: dt.date
    end_date: dt.date
    mean: float


def moving_window_means(series: DailySeries, window_size: int = 7) -> list[WindowValue]:
    """Compute the mean flow of every fully observed window.

    Args:
        series: Assembled daily series.
        window_size: Consecutive days per window (default 7).

    Returns:
        Accepted windows in chronological order of their start date.

    Raises:
        ValueError: If ``window_size`` is smaller than one.
        NoCompleteWindowsError: If no window is free of gaps.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")

    if len(series) < window_size:
        raise NoCompleteWindowsError(f"No valid {window_size}-day windows found")

    values = series.flows.to_numpy(dtype=float)
    complete = sliding_window_view(series.valid_mask, window_size).all(axis=1)
    if not complete.any():
        raise NoCompleteWindowsError(f"No valid {window_size}-day windows found")

    starts = np.flatnonzero(complete)
    sums = sliding_window_view(values, window_size)[starts].sum(axis=1)
    means = sums / window_size

    dates = series.flows.index
    windows = [
        WindowValue(
            start_date=dates[i].date(),
            end_date=dates[i + window_size - 1].date(),
            mean=float(mean),
        )
        for i, mean in zip(starts, means, strict=True)
    ]

    logger.debug(
        "%d of %d %d-day windows accepted",
        len(windows),
        len(complete),
        window_size,
    )
    return windows
