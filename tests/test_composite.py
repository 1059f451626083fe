"""Tests for composite rankings (QWP, QWI, PCR, Power Index, projected rank)."""

import pytest

from naia_ratings.models.game import Game, Location
from naia_ratings.models.ratings import AdjustedRating, QuadrantRecord, RPIComponents
from naia_ratings.models.team import Team
from naia_ratings.ratings.composite import (
    CompositeRankingEngine,
    find_conference_champions,
    power_index,
    primary_criteria_ranking,
    projected_ranks,
    quad_win_points,
    quality_win_index,
)

NAMES = {"a": "Alpha", "b": "Beta", "c": "Gamma"}


def test_quad_win_points():
    record = QuadrantRecord(team_id="a", wins=[1, 2, 3, 4], losses=[5, 5, 5, 5])
    assert quad_win_points(record) == pytest.approx(4 + 4 + 3 + 2)


def test_quality_win_index_penalizes_bad_losses_more():
    record = QuadrantRecord(team_id="a", wins=[1, 1, 1, 1], losses=[1, 1, 1, 1])
    assert quality_win_index(record) == pytest.approx(2.0 - 2.5)

    q1_loss = QuadrantRecord(team_id="a", losses=[1, 0, 0, 0])
    q4_loss = QuadrantRecord(team_id="a", losses=[0, 0, 0, 1])
    assert quality_win_index(q4_loss) < quality_win_index(q1_loss)


def test_power_index_inverts_defense():
    value = power_index(adj_ortg=110.0, adj_drtg=95.0, sos=0.5, win_pct=0.6, qwi=2.0)
    assert value == pytest.approx(0.35 * 110 + 0.35 * 105 + 0.15 * 50 + 0.075 * 60 + 0.075 * 2)

    better_defense = power_index(adj_ortg=110.0, adj_drtg=90.0, sos=0.5, win_pct=0.6, qwi=2.0)
    assert better_defense > value


class TestPrimaryCriteriaRanking:
    WIN_PCT = {"a": 0.8, "b": 0.6, "c": 0.4}
    RPI = {"a": 0.50, "b": 0.60, "c": 0.55}

    def test_equal_averages_fall_back_to_name(self):
        qwp = {"a": 5.0, "b": 3.0, "c": 10.0}
        pcr, averages = primary_criteria_ranking(NAMES, self.WIN_PCT, self.RPI, qwp)

        assert averages == {"a": pytest.approx(2.0), "b": pytest.approx(2.0), "c": pytest.approx(2.0)}
        assert pcr == {"a": 1, "b": 2, "c": 3}

    def test_improving_a_criterion_never_hurts(self):
        before, _ = primary_criteria_ranking(NAMES, self.WIN_PCT, self.RPI, {"a": 5.0, "b": 3.0, "c": 10.0})
        after, averages = primary_criteria_ranking(NAMES, self.WIN_PCT, self.RPI, {"a": 5.0, "b": 11.0, "c": 10.0})

        assert after["b"] <= before["b"]
        assert after == {"b": 1, "a": 2, "c": 3}
        assert averages["b"] == pytest.approx(4 / 3)

    def test_swapping_qwp_favors_the_team_that_gains_it(self):
        before, _ = primary_criteria_ranking(NAMES, self.WIN_PCT, self.RPI, {"a": 5.0, "b": 3.0, "c": 10.0})
        after, averages = primary_criteria_ranking(NAMES, self.WIN_PCT, self.RPI, {"a": 3.0, "b": 5.0, "c": 10.0})

        assert after["b"] <= before["b"]
        assert after["a"] >= before["a"]
        assert after == {"b": 1, "c": 2, "a": 3}
        assert averages["a"] == pytest.approx(7 / 3)


def test_projected_rank_swaps_champions_into_field():
    pcr = {f"t{i}": i for i in range(1, 71)}
    pr = projected_ranks(pcr, champions={"t5", "t66", "t70"}, field_size=64)

    # Best champion outside takes the worst non-champion spot inside
    assert pr["t66"] == 64 and pr["t64"] == 66
    assert pr["t70"] == 63 and pr["t63"] == 70
    assert pr["t5"] == 5
    assert sorted(pr.values()) == list(range(1, 71))


def test_projected_rank_without_champions_is_pcr():
    pcr = {"a": 1, "b": 2}
    assert projected_ranks(pcr, champions=(), field_size=1) == pcr


class TestConferenceChampions:
    TEAMS = {
        "a": Team(team_id="a", name="Alpha", conference="X"),
        "b": Team(team_id="b", name="Beta", conference="X"),
        "c": Team(team_id="c", name="Gamma", conference="Y"),
        "d": Team(team_id="d", name="Delta", conference="Y"),
    }

    def test_latest_postseason_conference_game_decides(self):
        games = [
            Game("g1", "2026-03-01", "a", "b", 70, 60, Location.NEUTRAL, is_conference=True, is_postseason=True),
            Game("g2", "2026-03-05", "b", "a", 75, 65, Location.NEUTRAL, is_conference=True, is_postseason=True),
            Game(
                "g3", "2026-03-20", "a", "b", 80, 60, Location.NEUTRAL,
                is_conference=True, is_postseason=True, is_national_tournament=True,
            ),
            Game("g4", "2026-02-01", "c", "d", 70, 60, Location.HOME, is_conference=True),
        ]
        assert find_conference_champions(games, self.TEAMS) == {"b"}

    def test_cross_conference_games_are_ignored(self):
        games = [Game("g1", "2026-03-01", "a", "c", 70, 60, Location.NEUTRAL, is_conference=True, is_postseason=True)]
        assert find_conference_champions(games, self.TEAMS) == set()


class TestCompositeRankingEngine:
    def _inputs(self):
        rpi = {
            "a": RPIComponents(team_id="a", win_pct=0.8, rpi=0.60, sos=0.55),
            "b": RPIComponents(team_id="b", win_pct=0.5, rpi=0.52, sos=0.50),
            "c": RPIComponents(team_id="c", win_pct=0.3, rpi=0.45, sos=0.48),
        }
        quadrants = {
            "a": QuadrantRecord(team_id="a", wins=[2, 1, 0, 1], losses=[1, 0, 0, 0]),
            "b": QuadrantRecord(team_id="b", wins=[0, 1, 1, 1], losses=[1, 1, 0, 0]),
            "c": QuadrantRecord(team_id="c", wins=[0, 0, 1, 1], losses=[2, 1, 1, 0]),
        }
        adjusted = {
            "a": AdjustedRating(team_id="a", adj_ortg=112.0, adj_drtg=96.0),
            "b": AdjustedRating(team_id="b", adj_ortg=104.0, adj_drtg=103.0),
        }
        return rpi, quadrants, adjusted

    def test_compute(self):
        rpi, quadrants, adjusted = self._inputs()
        results = CompositeRankingEngine(field_size=2).compute(
            ["a", "b", "c"], NAMES, rpi, quadrants, adjusted, champions={"c"}
        )

        assert results["a"].qwp == pytest.approx(4 * 2 + 2 * 1 + 0.5 * 1)
        assert results["a"].pcr == 1 and results["c"].pcr == 3
        assert results["c"].is_conference_champion
        assert results["c"].projected_rank == 2 and results["b"].projected_rank == 3
        assert results["a"].power_index == pytest.approx(
            power_index(112.0, 96.0, 0.55, 0.8, results["a"].qwi)
        )
        # No adjusted rating, no power index
        assert results["c"].power_index is None

    def test_empty(self):
        assert CompositeRankingEngine().compute([], {}, {}, {}, {}) == {}
