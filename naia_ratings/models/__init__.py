"""Domain models for teams, games and derived ratings."""

from .bracket import BracketProjection, Pod, PodEntry
from .game import Game, GameRecord, Location, TeamBox
from .ratings import (
    AdjustedRating,
    CompositeRanking,
    ConferenceRollup,
    QuadrantRecord,
    RPIComponents,
    TeamSeasonStats,
)
from .team import Team

__all__ = [
    "AdjustedRating",
    "BracketProjection",
    "CompositeRanking",
    "ConferenceRollup",
    "Game",
    "GameRecord",
    "Location",
    "Pod",
    "PodEntry",
    "QuadrantRecord",
    "RPIComponents",
    "Team",
    "TeamBox",
    "TeamSeasonStats",
]
