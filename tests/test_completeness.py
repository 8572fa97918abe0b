"""Tests for the completeness policy."""

import numpy as np
import pandas as pd
import pytest

from lowflow.errors import InsufficientDataError
from lowflow.hydro.completeness import analyze_completeness, apply_completeness_policy


@pytest.fixture
def two_months():
    """January 2020 complete; February 2020 with 10 missing and 5 zero days."""
    dates = pd.date_range("2020-01-01", "2020-02-29", freq="D")
    flows = np.ones(len(dates))
    february = np.flatnonzero(dates.month == 2)
    flows[february[:10]] = np.nan
    flows[february[10:15]] = 0.0
    return pd.DataFrame({"date": dates, "flow": flows})


class TestAnalyzeCompleteness:
    """Test per-period failure statistics."""

    def test_monthly_table(self, two_months):
        """Failure days combine missing and zero days."""
        table = analyze_completeness(two_months, "monthly", 10.0)

        assert len(table) == 2
        january, february = table.iloc[0], table.iloc[1]
        assert january["total_days"] == 31
        assert january["failure_days"] == 0
        assert bool(january["is_included"])

        assert february["total_days"] == 29
        assert february["null_days"] == 10
        assert february["zero_days"] == 5
        assert february["failure_days"] == 15
        assert february["valid_days"] == 14
        assert february["failure_percentage"] == pytest.approx(15 / 29 * 100)
        assert not bool(february["is_included"])

    def test_annual_table(self, two_months):
        """Annual mode aggregates the whole year."""
        table = analyze_completeness(two_months, "annually", 30.0)

        assert len(table) == 1
        assert table.iloc[0]["failure_percentage"] == pytest.approx(25.0)
        assert bool(table.iloc[0]["is_included"])

    def test_invalid_arguments(self, two_months):
        """Unknown modes and out-of-range thresholds are rejected."""
        with pytest.raises(ValueError, match="Invalid completeness mode"):
            analyze_completeness(two_months, "weekly", 10.0)

        with pytest.raises(ValueError, match="between 0 and 100"):
            analyze_completeness(two_months, "monthly", 120.0)


class TestApplyCompletenessPolicy:
    """Test filtering of raw observations."""

    def test_none_keeps_zeros(self, two_months):
        """Without filtering only absent flows are dropped."""
        kept = apply_completeness_policy(two_months)

        assert len(kept) == 60 - 10
        assert (kept == 0.0).sum() == 5

    def test_monthly_drops_failed_month(self, two_months):
        """Only the complete month survives a 10% threshold."""
        kept = apply_completeness_policy(two_months, "monthly", 10.0)

        assert len(kept) == 31
        assert (kept.index.month == 1).all()

    def test_annual_keeps_positive_flows(self, two_months):
        """Included periods keep their strictly positive flows only."""
        kept = apply_completeness_policy(two_months, "annually", 30.0)

        assert len(kept) == 31 + 14
        assert (kept > 0).all()

    def test_nothing_passes(self, two_months):
        """No included period is a fatal condition."""
        with pytest.raises(InsufficientDataError, match="No period passed"):
            apply_completeness_policy(two_months, "annually", 20.0)

    def test_threshold_required(self, two_months):
        """Filtering needs a threshold."""
        with pytest.raises(ValueError, match="max_failure_percentage is required"):
            apply_completeness_policy(two_months, "monthly")

    def test_generator_input(self, two_months):
        """Single-pass iterables are read once."""
        rows = ((d, f) for d, f in zip(two_months["date"], two_months["flow"]))
        kept = apply_completeness_policy(rows, "monthly", 10.0)

        assert len(kept) == 31
