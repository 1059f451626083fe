"""End-to-end ratings run for one league and season."""

from .ratings_run import (
    RatingsPipeline,
    RatingsRun,
    RatingsRunConfig,
    RunSummary,
    run_ratings,
    run_ratings_to_store,
)

__all__ = [
    "RatingsPipeline",
    "RatingsRun",
    "RatingsRunConfig",
    "RunSummary",
    "run_ratings",
    "run_ratings_to_store",
]
