"""
Four-Factor Aggregator.

Reduces one team's eligible games into cumulative box-score rates. Every
rate is a ratio of season totals, never an average of per-game ratios.

Possessions use the estimate

    poss = FGA - OREB + TOV + 0.475 * FTA

computed separately for each side of every game. Pace is the mean over
games of the two sides' average possessions.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Tuple

from ..models.game import GameRecord, TeamBox
from ..models.ratings import TeamSeasonStats
from .errors import InsufficientDataError

logger = logging.getLogger(__name__)

POSSESSION_FTA_WEIGHT = 0.475


def estimate_possessions(box: TeamBox) -> float:
    return box.fga - box.oreb + box.tov + POSSESSION_FTA_WEIGHT * box.fta


def _ratio(num: float, den: float) -> float:
    return num / den if den > 0 else 0.0


def _totals(boxes: Iterable[TeamBox]) -> Dict[str, float]:
    out = {name: 0.0 for name in TeamBox.__dataclass_fields__}
    for box in boxes:
        for name in out:
            out[name] += getattr(box, name)
    return out


class FourFactorAggregator:
    """Build :class:`TeamSeasonStats` from a team's eligible game rows."""

    def aggregate(self, team_id: str, games: List[GameRecord]) -> TeamSeasonStats:
        if not games:
            raise InsufficientDataError(team_id)

        n = len(games)
        wins = sum(1 for g in games if g.is_win)
        pts = float(sum(g.points for g in games))
        opp_pts = float(sum(g.opp_points for g in games))

        off = _totals(g.box for g in games)
        dfn = _totals(g.opp_box for g in games)

        poss = sum(estimate_possessions(g.box) for g in games)
        opp_poss = sum(estimate_possessions(g.opp_box) for g in games)
        pace = sum(0.5 * (estimate_possessions(g.box) + estimate_possessions(g.opp_box)) for g in games) / n

        ortg = 100.0 * _ratio(pts, poss)
        drtg = 100.0 * _ratio(opp_pts, opp_poss)

        return TeamSeasonStats(
            team_id=team_id,
            games=n,
            wins=wins,
            losses=n - wins,
            win_pct=wins / n,
            points_for=pts,
            points_against=opp_pts,
            possessions=poss,
            opp_possessions=opp_poss,
            pace=pace,
            ortg=ortg,
            drtg=drtg,
            net_rating=ortg - drtg,
            effective_fg_pct=_ratio(off["fgm"] + 0.5 * off["fg3m"], off["fga"]),
            turnover_pct=_ratio(off["tov"], poss),
            offensive_reb_pct=_ratio(off["oreb"], off["oreb"] + dfn["dreb"]),
            free_throw_rate=_ratio(off["fta"], off["fga"]),
            opp_effective_fg_pct=_ratio(dfn["fgm"] + 0.5 * dfn["fg3m"], dfn["fga"]),
            opp_turnover_pct=_ratio(dfn["tov"], opp_poss),
            defensive_reb_pct=_ratio(off["dreb"], off["dreb"] + dfn["oreb"]),
            opp_free_throw_rate=_ratio(dfn["fta"], dfn["fga"]),
            fg_pct=_ratio(off["fgm"], off["fga"]),
            three_pt_pct=_ratio(off["fg3m"], off["fg3a"]),
            ft_pct=_ratio(off["ftm"], off["fta"]),
            three_pt_rate=_ratio(off["fg3a"], off["fga"]),
        )

    def aggregate_all(
        self, schedules: Mapping[str, List[GameRecord]]
    ) -> Tuple[Dict[str, TeamSeasonStats], List[InsufficientDataError]]:
        """
        Aggregate every team in ``schedules``.

        Teams without eligible games are returned in the error list instead of
        being defaulted to zero.
        """
        stats: Dict[str, TeamSeasonStats] = {}
        errors: List[InsufficientDataError] = []
        for team_id in sorted(schedules):
            try:
                stats[team_id] = self.aggregate(team_id, schedules[team_id])
            except InsufficientDataError as exc:
                logger.warning("Excluding %s: %s", team_id, exc)
                errors.append(exc)
        return stats, errors
