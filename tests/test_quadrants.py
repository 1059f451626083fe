"""Tests for quadrant classification."""

import pytest

from naia_ratings.models.game import Game, Location
from naia_ratings.ratings.quadrants import QuadrantClassifier, classify_quadrant


@pytest.mark.parametrize(
    "rank, location, expected",
    [
        (1, Location.HOME, 1),
        (45, Location.HOME, 1),
        (46, Location.HOME, 2),
        (90, Location.HOME, 2),
        (91, Location.HOME, 3),
        (135, Location.HOME, 3),
        (136, Location.HOME, 4),
        (55, Location.NEUTRAL, 1),
        (56, Location.NEUTRAL, 2),
        (105, Location.NEUTRAL, 2),
        (150, Location.NEUTRAL, 3),
        (151, Location.NEUTRAL, 4),
        (65, Location.AWAY, 1),
        (66, Location.AWAY, 2),
        (120, Location.AWAY, 2),
        (165, Location.AWAY, 3),
        (166, Location.AWAY, 4),
        (400, Location.AWAY, 4),
    ],
)
def test_quadrant_boundaries(rank, location, expected):
    assert classify_quadrant(rank, location) == expected


def test_quadrant_accepts_location_strings():
    assert classify_quadrant(60, "away") == 1


def test_invalid_rank_rejected():
    with pytest.raises(ValueError):
        classify_quadrant(0, Location.HOME)


def _schedules(games):
    schedules = {}
    for game in games:
        for record in game.records():
            schedules.setdefault(record.team_id, []).append(record)
    return schedules


def test_records_use_opponent_rank_and_site():
    games = [
        Game("g1", "2025-12-01", "a", "b", 70, 60, location=Location.HOME),
        Game("g2", "2025-12-02", "a", "c", 60, 70, location=Location.AWAY),
        Game("g3", "2025-12-03", "a", "d", 80, 60, location=Location.NEUTRAL),
    ]
    ranks = {"a": 10, "b": 46, "c": 65, "d": 151}
    records = QuadrantClassifier().classify(_schedules(games), ranks)

    a = records["a"]
    assert a.record(2) == (1, 0)  # home vs #46
    assert a.record(1) == (0, 1)  # away at #65
    assert a.record(4) == (1, 0)  # neutral vs #151
    # b was away at #10
    assert records["b"].record(1) == (0, 1)


def test_games_against_unranked_opponents_are_skipped():
    games = [
        Game("g1", "2025-12-01", "a", "b", 70, 60, location=Location.HOME),
        Game("g2", "2025-12-02", "a", "x", 90, 40, location=Location.HOME),
    ]
    ranks = {"a": 1, "b": 2, "x": None}
    records = QuadrantClassifier().classify(_schedules(games), ranks, team_ids=["a", "b"])

    assert set(records) == {"a", "b"}
    assert sum(records["a"].wins) + sum(records["a"].losses) == 1
    assert records["a"].record(4) == (0, 0)
