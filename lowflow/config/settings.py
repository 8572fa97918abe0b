"""Configuration management for Q7,10 low-flow analysis."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator
import yaml

STANDARD_RETURN_PERIODS: list[int] = [2, 5, 10, 15, 20, 25, 30, 50, 75, 100]


class AnalysisConfig(BaseModel):
    """Windowing, year assignment and frequency-analysis settings."""

    window_size: int = Field(default=7, ge=1, description="Days per moving window")
    year_type: Literal["calendar", "hydrological"] = Field(
        default="calendar", description="Year assignment for annual minima"
    )
    hydro_start_month: int = Field(
        default=1, ge=1, le=12, description="First month of the hydrological year"
    )
    target_return_period: float = Field(default=10.0, gt=1.0)
    confidence_z: float = Field(
        default=1.96, gt=0.0, description="Normal multiplier for the 95% interval"
    )
    min_days: int = Field(default=365, ge=1)
    min_years: int = Field(default=10, ge=3)
    return_periods: list[float] = Field(
        default_factory=lambda: [float(t) for t in STANDARD_RETURN_PERIODS]
    )

    @field_validator("return_periods")
    @classmethod
    def validate_return_periods(cls, v: list[float]) -> list[float]:
        """Validate return periods (years, strictly greater than one)."""
        if not v:
            raise ValueError("return_periods must not be empty")
        if not all(t > 1 for t in v):
            raise ValueError("All return periods must be greater than 1 year")
        return sorted(set(v))

    @property
    def target_probability(self) -> float:
        """Annual non-exceedance probability of the design event."""
        return 1.0 / self.target_return_period


class PreprocessingConfig(BaseModel):
    """Completeness policy applied to raw observations."""

    mode: Literal["none", "monthly", "annually"] = Field(default="none")
    max_failure_percentage: float | None = Field(default=None, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def validate_threshold(self) -> "PreprocessingConfig":
        """A failure threshold is required whenever filtering is enabled."""
        if self.mode != "none" and self.max_failure_percentage is None:
            raise ValueError(
                "max_failure_percentage must be between 0 and 100 when mode is "
                f"'{self.mode}'"
            )
        return self


class DiagnosticsConfig(BaseModel):
    """Thresholds used when writing diagnostic notes."""

    skew_lower: float = Field(default=-1.02)
    skew_upper: float = Field(default=2.00)
    short_series_years: int = Field(default=15, ge=1)
    long_series_years: int = Field(default=30, ge=1)

    @model_validator(mode="after")
    def validate_bounds(self) -> "DiagnosticsConfig":
        """Check that the recommended ranges are not inverted."""
        if self.skew_lower >= self.skew_upper:
            raise ValueError("skew_lower must be smaller than skew_upper")
        if self.short_series_years > self.long_series_years:
            raise ValueError("short_series_years must not exceed long_series_years")
        return self


class Settings(BaseModel):
    """Main settings class containing all configuration."""

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "Settings":
        """Load settings from a YAML file."""
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
        return cls(**config_dict)

    def to_yaml(self, output_path: Path) -> None:
        """Save settings to a YAML file."""
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
