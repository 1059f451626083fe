"""Tests for the adjusted efficiency solver."""

import pytest

from naia_ratings.models.game import Location
from naia_ratings.ratings.adjusted_efficiency import (
    AdjustedEfficiencySolver,
    ScheduleEntry,
    max_change,
    relax,
)
from naia_ratings.ratings.errors import ConvergenceWarning


def _single_game(location=Location.NEUTRAL):
    return {
        "A": [ScheduleEntry("B", location)],
        "B": [ScheduleEntry("A", location.flipped())],
    }


RAW = {"A": (110.0, 100.0), "B": (100.0, 110.0)}


def test_two_team_fixed_point_matches_closed_form():
    solver = AdjustedEfficiencySolver(adjustment_factor=0.4, hca=0.0, epsilon=1e-9, max_iterations=500)
    result = solver.solve(RAW, _single_game())

    assert result.converged
    assert result.league_avg_ortg == pytest.approx(105.0)
    assert result.league_avg_drtg == pytest.approx(105.0)

    a, b = result.ratings["A"], result.ratings["B"]
    assert a.adj_ortg == pytest.approx(152 / 1.4, abs=1e-6)
    assert a.adj_drtg == pytest.approx(142 / 1.4, abs=1e-6)
    assert b.adj_ortg == pytest.approx(142 / 1.4, abs=1e-6)
    assert b.adj_drtg == pytest.approx(152 / 1.4, abs=1e-6)
    assert a.adj_net == pytest.approx(10 / 1.4, abs=1e-6)


def test_schedule_strength_is_opponent_final_ratings():
    solver = AdjustedEfficiencySolver(hca=0.0, epsilon=1e-9, max_iterations=500)
    result = solver.solve(RAW, _single_game())

    a, b = result.ratings["A"], result.ratings["B"]
    assert a.osos == pytest.approx(b.adj_ortg)
    assert a.dsos == pytest.approx(b.adj_drtg)
    assert a.nsos == pytest.approx(b.adj_ortg - b.adj_drtg)


def test_converged_ratings_are_a_fixed_point():
    solver = AdjustedEfficiencySolver(epsilon=1e-9, max_iterations=500)
    schedule = {
        "A": [ScheduleEntry("B", Location.HOME), ScheduleEntry("C", Location.AWAY)],
        "B": [ScheduleEntry("A", Location.AWAY), ScheduleEntry("C", Location.NEUTRAL)],
        "C": [ScheduleEntry("A", Location.HOME), ScheduleEntry("B", Location.NEUTRAL)],
    }
    raw = {"A": (112.0, 98.0), "B": (101.0, 104.0), "C": (95.0, 107.0)}
    result = solver.solve(raw, schedule)
    assert result.converged

    final = {t: (r.adj_ortg, r.adj_drtg) for t, r in result.ratings.items()}
    again = relax(
        final, raw, schedule, result.league_avg_ortg, result.league_avg_drtg,
        solver.adjustment_factor, solver.hca,
    )
    assert max_change(final, again) < 1e-8


def test_home_court_is_removed_from_home_team():
    solver = AdjustedEfficiencySolver(hca=3.5, epsilon=1e-9, max_iterations=500)
    raw = {"A": (100.0, 100.0), "B": (100.0, 100.0)}
    result = solver.solve(raw, _single_game(Location.HOME))

    home, road = result.ratings["A"], result.ratings["B"]
    assert home.adj_net < 0 < road.adj_net
    assert home.adj_net == pytest.approx(-road.adj_net)


def test_team_without_box_scores_does_not_move_the_league():
    schedule = {
        "A": [ScheduleEntry("B", Location.HOME), ScheduleEntry("C", Location.AWAY)],
        "B": [ScheduleEntry("A", Location.AWAY), ScheduleEntry("C", Location.NEUTRAL)],
        "C": [ScheduleEntry("A", Location.HOME), ScheduleEntry("B", Location.NEUTRAL)],
    }
    raw = {"A": (112.0, 98.0), "B": (101.0, 104.0), "C": (95.0, 107.0)}
    solver = AdjustedEfficiencySolver(epsilon=1e-9, max_iterations=500)
    baseline = solver.solve(raw, schedule)

    with_boxless = dict(schedule, N=[ScheduleEntry("A", Location.AWAY)])
    with_boxless["A"] = schedule["A"] + [ScheduleEntry("N", Location.HOME)]
    result = solver.solve(dict(raw, N=(0.0, 0.0)), with_boxless)

    assert result.league_avg_ortg == pytest.approx(baseline.league_avg_ortg)
    assert result.league_avg_drtg == pytest.approx(baseline.league_avg_drtg)
    for team_id in "ABC":
        before, after = baseline.ratings[team_id], result.ratings[team_id]
        assert after.adj_ortg == pytest.approx(before.adj_ortg)
        assert after.adj_drtg == pytest.approx(before.adj_drtg)
        assert after.osos == pytest.approx(before.osos)

    n = result.ratings["N"]
    assert (n.adj_ortg, n.adj_drtg) == (0.0, 0.0)


def test_no_box_scores_anywhere_keeps_raw_ratings():
    result = AdjustedEfficiencySolver().solve({"A": (0.0, 0.0), "B": (0.0, 0.0)}, _single_game())
    assert result.converged
    assert result.league_avg_ortg == 0.0
    assert (result.ratings["A"].adj_ortg, result.ratings["A"].adj_drtg) == (0.0, 0.0)


def test_team_without_opponents_keeps_raw_ratings():
    solver = AdjustedEfficiencySolver()
    raw = dict(RAW, C=(104.0, 101.0))
    schedule = dict(_single_game(), C=[])
    result = solver.solve(raw, schedule)

    c = result.ratings["C"]
    assert (c.adj_ortg, c.adj_drtg) == (104.0, 101.0)
    assert c.osos == pytest.approx(result.league_avg_ortg)


def test_iteration_cap_warns_and_keeps_last_iterate():
    # Undamped two-team system oscillates between two states forever
    solver = AdjustedEfficiencySolver(adjustment_factor=1.0, hca=0.0, epsilon=0.01, max_iterations=10)
    with pytest.warns(ConvergenceWarning):
        result = solver.solve(RAW, _single_game())

    assert not result.converged
    assert result.iterations == 10
    # Each pass swings every rating by 5 and each net rating by 10
    assert result.max_delta == pytest.approx(10.0)
    assert set(result.ratings) == {"A", "B"}


def test_empty_input():
    result = AdjustedEfficiencySolver().solve({}, {})
    assert result.ratings == {}
    assert result.converged


def test_relax_does_not_mutate_inputs():
    ratings = dict(RAW)
    relax(ratings, RAW, _single_game(), 105.0, 105.0, 0.4, 3.5)
    assert ratings == RAW


@pytest.mark.parametrize("kwargs", [{"max_iterations": 0}, {"epsilon": 0.0}])
def test_invalid_solver_settings(kwargs):
    with pytest.raises(ValueError):
        AdjustedEfficiencySolver(**kwargs)
