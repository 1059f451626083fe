"""Rating, ranking and classification components."""

from .adjusted_efficiency import AdjustedEfficiencySolver, SolverResult
from .composite import CompositeRankingEngine
from .errors import ConvergenceWarning, InsufficientDataError, OpponentGraphError
from .four_factors import FourFactorAggregator
from .quadrants import QuadrantClassifier, classify_quadrant
from .rpi import RPISolver

__all__ = [
    "AdjustedEfficiencySolver",
    "CompositeRankingEngine",
    "ConvergenceWarning",
    "FourFactorAggregator",
    "InsufficientDataError",
    "OpponentGraphError",
    "QuadrantClassifier",
    "RPISolver",
    "SolverResult",
    "classify_quadrant",
]
