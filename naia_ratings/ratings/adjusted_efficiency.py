"""
Adjusted Efficiency Solver.

Additive iterative SOS adjustment. Each team's raw ORTG/DRTG is shifted by
how far its opponents' current adjusted ratings sit from league average:

    adj_ortg[t] = ortg[t] + k * (league_avg_drtg - mean(opp adj_drtg))
    adj_drtg[t] = drtg[t] - k * (mean(opp adj_ortg) - league_avg_ortg)

Opponent ratings are shifted by half the home-court advantage according to
where the game was played. ``relax`` is one pure Jacobi pass over the whole
league; the solver calls it until the largest change in any team's adjusted
ratings falls below epsilon, or the iteration cap is reached.

With k < 1 each pass is a contraction (every rating moves by at most k times
the largest change of the previous pass). k = 1 with no HCA is the undamped
form, which can oscillate on some schedules; the cap bounds the work either way.

Teams without box-score data (raw ratings of zero) keep their raw values and
never feed the league averages or any opponent average.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

import numpy as np

from ..models.game import GameRecord, Location
from ..models.ratings import AdjustedRating
from .errors import ConvergenceWarning

logger = logging.getLogger(__name__)

# (adj_ortg, adj_drtg)
Ratings = Dict[str, Tuple[float, float]]


@dataclass(frozen=True)
class ScheduleEntry:
    opponent_id: str
    location: Location


@dataclass
class SolverResult:
    ratings: Dict[str, AdjustedRating]
    iterations: int
    converged: bool
    max_delta: float
    league_avg_ortg: float
    league_avg_drtg: float


def build_schedule(schedules: Mapping[str, List[GameRecord]]) -> Dict[str, List[ScheduleEntry]]:
    return {
        team_id: [ScheduleEntry(g.opponent_id, g.location) for g in rows]
        for team_id, rows in schedules.items()
    }


def has_rating(rating: Tuple[float, float]) -> bool:
    """Whether a team has box-score data (both raw ratings positive)."""
    return rating[0] > 0 and rating[1] > 0


def _opponent_view(rating: Tuple[float, float], location: Location, hca: float) -> Tuple[float, float]:
    """Opponent (adj_ortg, adj_drtg) as seen from the rated team's site."""
    opp_o, opp_d = rating
    if location is Location.HOME:
        # Opponent is on the road
        return opp_o - hca / 2, opp_d + hca / 2
    if location is Location.AWAY:
        return opp_o + hca / 2, opp_d - hca / 2
    return opp_o, opp_d


def relax(
    ratings: Ratings,
    raw: Ratings,
    schedule: Mapping[str, List[ScheduleEntry]],
    league_avg_ortg: float,
    league_avg_drtg: float,
    factor: float,
    hca: float,
) -> Ratings:
    """One full adjustment pass. Does not mutate its inputs."""
    next_ratings: Ratings = {}
    for team_id, (ortg, drtg) in raw.items():
        if not has_rating((ortg, drtg)):
            next_ratings[team_id] = (ortg, drtg)
            continue

        opp_o: List[float] = []
        opp_d: List[float] = []
        for entry in schedule.get(team_id, []):
            if entry.opponent_id not in ratings or not has_rating(ratings[entry.opponent_id]):
                continue
            o, d = _opponent_view(ratings[entry.opponent_id], entry.location, hca)
            opp_o.append(o)
            opp_d.append(d)

        if not opp_o:
            next_ratings[team_id] = (ortg, drtg)
            continue

        avg_opp_o = sum(opp_o) / len(opp_o)
        avg_opp_d = sum(opp_d) / len(opp_d)
        next_ratings[team_id] = (
            ortg + factor * (league_avg_drtg - avg_opp_d),
            drtg - factor * (avg_opp_o - league_avg_ortg),
        )
    return next_ratings


def max_change(before: Ratings, after: Ratings) -> float:
    """Largest absolute move in any team's adj_ortg, adj_drtg or adj_net."""
    delta = 0.0
    for team_id, (o1, d1) in after.items():
        o0, d0 = before.get(team_id, (o1, d1))
        delta = max(delta, abs(o1 - o0), abs(d1 - d0), abs((o1 - d1) - (o0 - d0)))
    return delta


class AdjustedEfficiencySolver:
    """Fixed-point solver for schedule-adjusted offensive/defensive ratings."""

    # Share of the opponent-strength gap credited per pass
    ADJUSTMENT_FACTOR: float = 0.4
    # Home-court advantage in points per 100 possessions, split across both sides
    HCA_POINTS: float = 3.5
    EPSILON: float = 0.01
    MAX_ITERATIONS: int = 100

    def __init__(
        self,
        adjustment_factor: float = ADJUSTMENT_FACTOR,
        hca: float = HCA_POINTS,
        epsilon: float = EPSILON,
        max_iterations: int = MAX_ITERATIONS,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        if epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")
        self.adjustment_factor = adjustment_factor
        self.hca = hca
        self.epsilon = epsilon
        self.max_iterations = max_iterations

    def solve(self, raw: Ratings, schedule: Mapping[str, List[ScheduleEntry]]) -> SolverResult:
        """
        Args:
            raw: team_id -> (raw ORTG, raw DRTG) for every rated team.
            schedule: team_id -> opponents faced, with the game site.

        Returns:
            SolverResult with the final (or best, when capped) iterate.
        """
        if not raw:
            return SolverResult({}, 0, True, 0.0, 0.0, 0.0)

        rated = [r for r in raw.values() if has_rating(r)]
        if not rated:
            logger.warning("No team has box-score data; adjusted ratings equal raw ratings")
        league_avg_ortg = float(np.mean([o for o, _ in rated])) if rated else 0.0
        league_avg_drtg = float(np.mean([d for _, d in rated])) if rated else 0.0

        ratings: Ratings = dict(raw)
        converged = False
        delta = float("inf")
        iterations = 0
        while iterations < self.max_iterations:
            next_ratings = relax(
                ratings, raw, schedule, league_avg_ortg, league_avg_drtg,
                self.adjustment_factor, self.hca,
            )
            delta = max_change(ratings, next_ratings)
            ratings = next_ratings
            iterations += 1
            logger.debug("SOS pass %d: max change %.6f", iterations, delta)
            if delta < self.epsilon:
                converged = True
                break

        if not converged:
            message = (
                f"Adjusted ratings did not converge in {self.max_iterations} iterations "
                f"(last max change {delta:.4f}, epsilon {self.epsilon})"
            )
            logger.warning(message)
            warnings.warn(message, ConvergenceWarning, stacklevel=2)
        else:
            logger.info("Adjusted ratings converged after %d iterations", iterations)

        return SolverResult(
            ratings=self._finalize(ratings, schedule, league_avg_ortg, league_avg_drtg),
            iterations=iterations,
            converged=converged,
            max_delta=delta,
            league_avg_ortg=league_avg_ortg,
            league_avg_drtg=league_avg_drtg,
        )

    @staticmethod
    def _finalize(
        ratings: Ratings,
        schedule: Mapping[str, List[ScheduleEntry]],
        league_avg_ortg: float,
        league_avg_drtg: float,
    ) -> Dict[str, AdjustedRating]:
        out: Dict[str, AdjustedRating] = {}
        for team_id, (adj_o, adj_d) in ratings.items():
            opps = [
                e.opponent_id
                for e in schedule.get(team_id, [])
                if e.opponent_id in ratings and has_rating(ratings[e.opponent_id])
            ]
            osos = float(np.mean([ratings[o][0] for o in opps])) if opps else league_avg_ortg
            dsos = float(np.mean([ratings[o][1] for o in opps])) if opps else league_avg_drtg
            out[team_id] = AdjustedRating(
                team_id=team_id,
                adj_ortg=adj_o,
                adj_drtg=adj_d,
                osos=osos,
                dsos=dsos,
                nsos=osos - dsos,
            )
        return out
