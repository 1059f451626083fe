"""Seed tiers, pods and travel distance."""

from .pods import PodAssigner, build_bracket_projection, seed_tiers
from .travel_distance import haversine_miles, team_distance

__all__ = [
    "PodAssigner",
    "build_bracket_projection",
    "haversine_miles",
    "seed_tiers",
    "team_distance",
]
