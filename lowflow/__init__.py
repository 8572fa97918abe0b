"""Q7,10 low-flow frequency analysis for daily discharge records."""

from .config import Settings
from .errors import Q710Error
from .pipeline import (
    METHOD_NOTE,
    Q710Failure,
    Q710Outcome,
    Q710Result,
    calculate_q710,
    calculate_q710_batch,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "Q710Error",
    "Q710Result",
    "Q710Failure",
    "Q710Outcome",
    "METHOD_NOTE",
    "calculate_q710",
    "calculate_q710_batch",
]
