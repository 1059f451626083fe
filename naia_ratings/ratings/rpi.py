"""
RPI Solver.

The schedule is an adjacency list (team -> list of game rows). Opponents'
win percentage must exclude the games played against the team being rated,
and that exclusion differs for every (team, opponent) edge, so the solver
keeps an explicit head-to-head accumulator per edge:

  pass 1  overall W/L per team, plus W/L per (team, opponent) edge
  pass 2  OWP[t]  = mean over t's games of WP(opponent without games vs t)
          OOWP[t] = mean over t's games of OWP[opponent]

RPI = 0.30*WP + 0.50*OWP + 0.20*OOWP
SOS = 0.67*OWP + 0.33*OOWP
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from ..models.game import GameRecord
from ..models.ratings import RPIComponents
from .directionality import sort_descending

logger = logging.getLogger(__name__)

# Ranking comparisons ignore float noise below this many decimals.
RANK_PRECISION = 9


@dataclass
class _EdgeRecord:
    wins: int = 0
    games: int = 0


def deterministic_rank(
    values: Mapping[str, float],
    win_pct: Mapping[str, float],
    names: Mapping[str, str],
    descending: bool = True,
) -> Dict[str, int]:
    """
    Rank teams 1..n by ``values``.

    Ties fall to raw win% (descending), then team name (ascending), then
    team id, so the ordering never depends on input order.
    """
    sign = -1.0 if descending else 1.0

    def key(team_id: str):
        return (
            sign * round(values[team_id], RANK_PRECISION),
            -round(win_pct.get(team_id, 0.0), RANK_PRECISION),
            names.get(team_id, team_id),
            team_id,
        )

    ordered = sorted(values, key=key)
    return {team_id: idx + 1 for idx, team_id in enumerate(ordered)}


class RPISolver:
    """Compute WP / OWP / OOWP / RPI / SOS over the full opponent graph."""

    WP_WEIGHT: float = 0.30
    OWP_WEIGHT: float = 0.50
    OOWP_WEIGHT: float = 0.20

    SOS_OWP_WEIGHT: float = 0.67
    SOS_OOWP_WEIGHT: float = 0.33

    def solve(
        self,
        schedules: Mapping[str, List[GameRecord]],
        names: Optional[Mapping[str, str]] = None,
        rankable: Optional[Iterable[str]] = None,
    ) -> Dict[str, RPIComponents]:
        """
        Args:
            schedules: team_id -> that team's eligible game rows. Must be
                closed: every opponent must have its own schedule entry.
            names: team_id -> display name, used for the rank tie-break.
            rankable: team ids that may receive a rank. Defaults to every
                team in ``schedules``; others still feed OWP/OOWP.

        Returns:
            team_id -> RPIComponents for every team in ``schedules``.
        """
        names = dict(names or {})
        rankable_ids = set(schedules) if rankable is None else set(rankable) & set(schedules)

        # --- Pass 1: overall and per-edge records ---
        wins: Dict[str, int] = {}
        games: Dict[str, int] = {}
        edges: Dict[str, Dict[str, _EdgeRecord]] = defaultdict(lambda: defaultdict(_EdgeRecord))

        for team_id, rows in schedules.items():
            wins[team_id] = sum(1 for g in rows if g.is_win)
            games[team_id] = len(rows)
            for g in rows:
                edge = edges[team_id][g.opponent_id]
                edge.games += 1
                edge.wins += int(g.is_win)

        win_pct = {t: (wins[t] / games[t] if games[t] else 0.0) for t in schedules}

        # --- Pass 2: OWP with per-edge self-exclusion ---
        owp: Dict[str, float] = {}
        for team_id, rows in schedules.items():
            owp[team_id] = self._opponents_win_pct(team_id, rows, wins, games, edges)

        oowp: Dict[str, float] = {}
        for team_id, rows in schedules.items():
            opp_owps = [owp[g.opponent_id] for g in rows if g.opponent_id in owp]
            oowp[team_id] = sum(opp_owps) / len(opp_owps) if opp_owps else 0.0

        results: Dict[str, RPIComponents] = {}
        for team_id in schedules:
            wp = win_pct[team_id]
            rpi = self.WP_WEIGHT * wp + self.OWP_WEIGHT * owp[team_id] + self.OOWP_WEIGHT * oowp[team_id]
            sos = self.SOS_OWP_WEIGHT * owp[team_id] + self.SOS_OOWP_WEIGHT * oowp[team_id]
            results[team_id] = RPIComponents(
                team_id=team_id,
                wins=wins[team_id],
                losses=games[team_id] - wins[team_id],
                win_pct=wp,
                opponents_win_pct=owp[team_id],
                opponents_opponents_win_pct=oowp[team_id],
                rpi=rpi,
                sos=sos,
            )

        ranks = deterministic_rank(
            {t: results[t].rpi for t in rankable_ids},
            win_pct,
            names,
            descending=sort_descending("rpi"),
        )
        for team_id, rank in ranks.items():
            results[team_id].rank = rank

        logger.info("RPI computed for %d teams (%d ranked)", len(results), len(ranks))
        return results

    @staticmethod
    def _opponents_win_pct(
        team_id: str,
        rows: List[GameRecord],
        wins: Mapping[str, int],
        games: Mapping[str, int],
        edges: Mapping[str, Mapping[str, _EdgeRecord]],
    ) -> float:
        samples: List[float] = []
        for g in rows:
            opp = g.opponent_id
            if opp not in games:
                continue
            vs_us = edges[opp].get(team_id, _EdgeRecord())
            remaining = games[opp] - vs_us.games
            if remaining <= 0:
                continue
            samples.append((wins[opp] - vs_us.wins) / remaining)
        return sum(samples) / len(samples) if samples else 0.0
