"""Configuration module."""

from .settings import (
    STANDARD_RETURN_PERIODS,
    AnalysisConfig,
    DiagnosticsConfig,
    PreprocessingConfig,
    Settings,
)

__all__ = [
    "Settings",
    "AnalysisConfig",
    "PreprocessingConfig",
    "DiagnosticsConfig",
    "STANDARD_RETURN_PERIODS",
]
