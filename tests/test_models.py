"""Unit tests for team, game and ratings models."""

import math

import pytest

from naia_ratings.models.bracket import BracketProjection, Pod, PodEntry
from naia_ratings.models.game import Game, Location, TeamBox
from naia_ratings.models.ratings import AdjustedRating, QuadrantRecord
from naia_ratings.models.team import Team


@pytest.fixture
def sample_game():
    return Game(
        game_id="g1",
        game_date="2025-11-15",
        team_id="a",
        opponent_id="b",
        team_score=78,
        opponent_score=70,
        location=Location.HOME,
        team_box=TeamBox(fgm=28, fga=60, fg3m=8, fg3a=22, ftm=14, fta=18, oreb=10, dreb=25, tov=12),
        opponent_box=TeamBox(fgm=26, fga=62, fg3m=6, fg3a=20, ftm=12, fta=16, oreb=9, dreb=24, tov=14),
        is_conference=True,
    )


def test_team_requires_both_coordinates():
    with pytest.raises(ValueError):
        Team(team_id="a", name="A", conference="X", latitude=40.0)


def test_team_rejects_unknown_league():
    with pytest.raises(ValueError):
        Team(team_id="a", name="A", conference="X", league="coed")


def test_team_round_trip_keeps_location():
    team = Team(team_id="a", name="A", conference="X", latitude=40.0, longitude=-95.0, city="Olathe", state="KS")
    restored = Team.from_dict(team.to_dict())
    assert restored == team
    assert restored.has_location


def test_location_flip():
    assert Location.HOME.flipped() is Location.AWAY
    assert Location.AWAY.flipped() is Location.HOME
    assert Location.NEUTRAL.flipped() is Location.NEUTRAL


def test_game_records_mirror_each_side(sample_game):
    team_side, opp_side = sample_game.records()

    assert team_side.team_id == "a" and team_side.location is Location.HOME
    assert opp_side.team_id == "b" and opp_side.location is Location.AWAY
    assert team_side.is_win and not opp_side.is_win
    assert opp_side.box == sample_game.opponent_box
    assert opp_side.opp_box == sample_game.team_box
    assert opp_side.is_conference


def test_completed_game_cannot_tie():
    with pytest.raises(ValueError, match="tied"):
        Game(game_id="g", game_date="2025-11-15", team_id="a", opponent_id="b", team_score=70, opponent_score=70)


def test_completed_game_needs_score():
    with pytest.raises(ValueError):
        Game(game_id="g", game_date="2025-11-15", team_id="a", opponent_id="b", team_score=None, opponent_score=70)


def test_scheduled_game_is_not_eligible():
    game = Game(
        game_id="g", game_date="2026-02-01", team_id="a", opponent_id="b",
        team_score=None, opponent_score=None, is_completed=False,
    )
    assert not game.is_eligible()
    assert game.winner_id is None


def test_national_tournament_eligibility_is_configurable(sample_game):
    sample_game.is_national_tournament = True
    assert not sample_game.is_eligible()
    assert sample_game.is_eligible(include_national_tournament=True)


def test_exhibition_and_non_naia_games_are_not_eligible(sample_game):
    sample_game.is_exhibition = True
    assert not sample_game.is_eligible()
    sample_game.is_exhibition = False
    sample_game.is_naia = False
    assert not sample_game.is_eligible()


def test_game_from_dict_defaults_missing_box_to_zero():
    game = Game.from_dict(
        {"game_id": 7, "team_id": "a", "opponent_id": "b", "team_score": 60, "opponent_score": 55, "location": "away"}
    )
    assert game.game_id == "7"
    assert game.location is Location.AWAY
    assert game.team_box == TeamBox()


def test_game_round_trip(sample_game):
    restored = Game.from_dict(sample_game.to_dict())
    assert restored.to_dict() == sample_game.to_dict()


def test_adjusted_rating_net():
    rating = AdjustedRating(team_id="a", adj_ortg=108.0, adj_drtg=99.5)
    assert rating.adj_net == pytest.approx(8.5)
    assert rating.to_dict()["adj_net"] == pytest.approx(8.5)


def test_quadrant_record_rejects_out_of_range():
    record = QuadrantRecord(team_id="a")
    record.add(1, True)
    record.add(4, False)
    assert record.record(1) == (1, 0)
    assert record.record(4) == (0, 1)
    with pytest.raises(ValueError):
        record.add(5, True)


class TestPod:
    def _entry(self, team_id, seed, conference="X"):
        return PodEntry(team_id=team_id, name=team_id.upper(), conference=conference, seed=seed, rank=seed)

    def test_host_must_be_one_seed(self):
        with pytest.raises(ValueError):
            Pod(pod_number=1, host=self._entry("h", 2))

    def test_place_fills_only_open_slot(self):
        pod = Pod(pod_number=1, host=self._entry("h", 1), slots={2: None, 3: None, 4: None})
        pod.place(self._entry("v", 2, conference="Y"))

        assert not pod.is_open(2)
        assert pod.is_open(3)
        assert pod.conferences == ["X", "Y"]
        with pytest.raises(ValueError):
            pod.place(self._entry("w", 2))

    def test_unfilled_slots_serialize_as_none(self):
        pod = Pod(pod_number=1, host=self._entry("h", 1), slots={2: None})
        assert pod.to_dict()["slots"] == {"2": None}

    def test_unknown_distance_serializes_as_none(self):
        entry = self._entry("v", 2)
        entry.distance = math.inf
        assert entry.to_dict()["distance"] is None

    def test_projection_tier_lookup(self):
        projection = BracketProjection(league="mens", season="2025-26", seeded_by="rpi", tiers=[["a", "b"], ["c"]])
        assert projection.tier_of("c") == 2
        assert projection.tier_of("z") is None
