"""Daily series handling for low-flow analysis.

Assembly of gap-aware daily series, completeness filtering, moving-window
means and annual minimum extraction.
"""

from .annual import AnnualMinimum, annual_minima, assign_year, require_min_years
from .completeness import analyze_completeness, apply_completeness_policy
from .series import DailyPoint, DailySeries, assemble_daily_series, require_min_days
from .windows import WindowValue, moving_window_means

__all__ = [
    "DailyPoint",
    "DailySeries",
    "assemble_daily_series",
    "require_min_days",
    "analyze_completeness",
    "apply_completeness_policy",
    "WindowValue",
    "moving_window_means",
    "AnnualMinimum",
    "assign_year",
    "annual_minima",
    "require_min_years",
]
