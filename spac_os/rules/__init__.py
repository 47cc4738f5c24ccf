"""Deal entity rule engine: status transitions and target fit scoring."""

from .transitions import StatusTransitionValidator, can_transition
from .fit_score import FitScoreCalculator, calculate_fit_score
from .timestamps import status_date_fields

__all__ = [
    "StatusTransitionValidator",
    "can_transition",
    "FitScoreCalculator",
    "calculate_fit_score",
    "status_date_fields",
]
