"""
Composite Ranking Engine.

Quad Win Points (QWP)
    4*Q1W + 2*Q2W + 1*Q3W + 0.5*Q4W

Quality Win Index (QWI)
    Q1W*1.0 - Q1L*0.25 + Q2W*0.6 - Q2L*0.5 + Q3W*0.3 - Q3L*0.75 + Q4W*0.1 - Q4L*1.0

Primary Criteria Ranking (PCR)
    Mean of the team's win%, RPI and QWP ranks, re-ranked ascending.

Power Index
    0.35*AdjO + 0.35*(200 - AdjD) + 0.15*(100*SOS) + 0.075*(100*WP) + 0.075*QWI

Projected Rank (PR)
    PCR, except conference champions outside the field swap places with the
    lowest non-champions inside it (automatic qualification).
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..models.game import Game
from ..models.ratings import AdjustedRating, CompositeRanking, QuadrantRecord, RPIComponents
from ..models.team import Team
from .directionality import oriented, sort_descending
from .rpi import RANK_PRECISION, deterministic_rank

logger = logging.getLogger(__name__)

QWP_WEIGHTS = (4.0, 2.0, 1.0, 0.5)
QWI_WIN_WEIGHTS = (1.0, 0.6, 0.3, 0.1)
QWI_LOSS_WEIGHTS = (0.25, 0.5, 0.75, 1.0)

POWER_INDEX_WEIGHTS = {
    "adj_ortg": 0.35,
    "adj_drtg": 0.35,
    "sos": 0.15,
    "win_pct": 0.075,
    "qwi": 0.075,
}


def quad_win_points(record: QuadrantRecord) -> float:
    return sum(w * wins for w, wins in zip(QWP_WEIGHTS, record.wins))


def quality_win_index(record: QuadrantRecord) -> float:
    gained = sum(w * wins for w, wins in zip(QWI_WIN_WEIGHTS, record.wins))
    lost = sum(w * losses for w, losses in zip(QWI_LOSS_WEIGHTS, record.losses))
    return gained - lost


def power_index(adj_ortg: float, adj_drtg: float, sos: float, win_pct: float, qwi: float) -> float:
    """
    Weighted composite on a points-per-100 scale.

    Defense is inverted through the shared directionality lookup; SOS and
    win% are fractions scaled to 0-100 before weighting.
    """
    w = POWER_INDEX_WEIGHTS
    return (
        w["adj_ortg"] * oriented("adj_ortg", adj_ortg)
        + w["adj_drtg"] * oriented("adj_drtg", adj_drtg)
        + w["sos"] * sos * 100.0
        + w["win_pct"] * win_pct * 100.0
        + w["qwi"] * qwi
    )


def primary_criteria_ranking(
    names: Mapping[str, str],
    win_pct: Mapping[str, float],
    rpi: Mapping[str, float],
    qwp: Mapping[str, float],
) -> Tuple[Dict[str, int], Dict[str, float]]:
    """
    Returns:
        (team_id -> PCR position, team_id -> averaged criteria rank)
    """
    team_ids = list(rpi)
    by_win_pct = deterministic_rank(
        {t: win_pct[t] for t in team_ids}, win_pct, names, descending=sort_descending("win_pct")
    )
    by_rpi = deterministic_rank(
        {t: rpi[t] for t in team_ids}, win_pct, names, descending=sort_descending("rpi")
    )
    by_qwp = deterministic_rank(
        {t: qwp[t] for t in team_ids}, win_pct, names, descending=sort_descending("qwp")
    )

    averages = {t: (by_win_pct[t] + by_rpi[t] + by_qwp[t]) / 3.0 for t in team_ids}
    ordered = sorted(
        team_ids,
        key=lambda t: (round(averages[t], RANK_PRECISION), names.get(t, t), t),
    )
    return {t: idx + 1 for idx, t in enumerate(ordered)}, averages


def projected_ranks(pcr: Mapping[str, int], champions: Iterable[str], field_size: int = 64) -> Dict[str, int]:
    """Apply the automatic-qualifier bump to PCR positions."""
    champions = set(champions)
    outside = sorted((t for t in pcr if t in champions and pcr[t] > field_size), key=lambda t: pcr[t])
    inside = sorted((t for t in pcr if t not in champions and pcr[t] <= field_size), key=lambda t: -pcr[t])

    pr = dict(pcr)
    for champion, bumped in zip(outside, inside):
        pr[champion], pr[bumped] = pcr[bumped], pcr[champion]
        logger.info("Champion %s moved into the field at %d, %s moved to %d", champion, pr[champion], bumped, pr[bumped])
    return pr


def find_conference_champions(games: Iterable[Game], teams: Mapping[str, Team]) -> Set[str]:
    """
    Winner of each conference's last completed postseason conference game.

    National tournament games never count.
    """
    finals: Dict[str, Game] = {}
    for game in games:
        if not (game.is_completed and game.is_postseason and game.is_conference):
            continue
        if game.is_exhibition or game.is_national_tournament:
            continue
        team = teams.get(game.team_id)
        opponent = teams.get(game.opponent_id)
        if team is None or opponent is None or not team.conference or team.conference != opponent.conference:
            continue
        current = finals.get(team.conference)
        if current is None or (game.game_date, game.game_id) > (current.game_date, current.game_id):
            finals[team.conference] = game
    return {game.winner_id for game in finals.values()}


class CompositeRankingEngine:
    """Derive QWP / QWI / PCR / Power Index / PR for every ranked team."""

    FIELD_SIZE: int = 64

    def __init__(self, field_size: int = FIELD_SIZE):
        self.field_size = field_size

    def compute(
        self,
        team_ids: List[str],
        names: Mapping[str, str],
        rpi: Mapping[str, RPIComponents],
        quadrants: Mapping[str, QuadrantRecord],
        adjusted: Mapping[str, AdjustedRating],
        champions: Optional[Iterable[str]] = None,
    ) -> Dict[str, CompositeRanking]:
        """
        Args:
            team_ids: ranked teams (every id must have RPI and quadrant rows).
            champions: conference champions, for the projected rank.
        """
        champions = set(champions or ())
        if not team_ids:
            return {}

        qwp = {t: quad_win_points(quadrants[t]) for t in team_ids}
        qwi = {t: quality_win_index(quadrants[t]) for t in team_ids}
        win_pct = {t: rpi[t].win_pct for t in team_ids}

        pcr, pcr_avg = primary_criteria_ranking(
            names,
            win_pct,
            {t: rpi[t].rpi for t in team_ids},
            qwp,
        )
        pr = projected_ranks(pcr, champions, self.field_size)

        results: Dict[str, CompositeRanking] = {}
        for t in team_ids:
            rating: Optional[AdjustedRating] = adjusted.get(t)
            pi = None
            if rating is not None:
                pi = power_index(rating.adj_ortg, rating.adj_drtg, rpi[t].sos, win_pct[t], qwi[t])
            results[t] = CompositeRanking(
                team_id=t,
                qwp=qwp[t],
                qwi=qwi[t],
                pcr=pcr[t],
                pcr_avg=pcr_avg[t],
                power_index=pi,
                projected_rank=pr[t],
                is_conference_champion=t in champions,
            )
        return results
