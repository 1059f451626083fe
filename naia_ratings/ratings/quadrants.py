"""
Quadrant Classifier.

Thresholds from the NAIA Selection Committee policy, keyed by game location
and the opponent's RPI rank (inclusive upper bound of Q1, Q2, Q3):

    Home     45 / 90 / 135
    Neutral  55 / 105 / 150
    Away     65 / 120 / 165
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from ..models.game import GameRecord, Location
from ..models.ratings import QuadrantRecord

QUADRANT_THRESHOLDS: Dict[Location, tuple] = {
    Location.HOME: (45, 90, 135),
    Location.NEUTRAL: (55, 105, 150),
    Location.AWAY: (65, 120, 165),
}


def classify_quadrant(opp_rank: int, location: Location) -> int:
    """Quadrant (1-4) of a game against an opponent ranked ``opp_rank``."""
    if opp_rank < 1:
        raise ValueError(f"RPI rank must be >= 1, got {opp_rank}")
    for quadrant, upper in enumerate(QUADRANT_THRESHOLDS[Location(location)], start=1):
        if opp_rank <= upper:
            return quadrant
    return 4


class QuadrantClassifier:
    """Accumulate per-quadrant records from final RPI ranks."""

    def classify(
        self,
        schedules: Mapping[str, List[GameRecord]],
        ranks: Mapping[str, Optional[int]],
        team_ids: Optional[List[str]] = None,
    ) -> Dict[str, QuadrantRecord]:
        """
        Args:
            schedules: team_id -> eligible game rows (same snapshot as the RPI).
            ranks: team_id -> RPI rank; None or missing means unranked.
            team_ids: teams to build records for (defaults to ``schedules``).

        Games against unranked opponents are skipped entirely.
        """
        records: Dict[str, QuadrantRecord] = {}
        for team_id in team_ids if team_ids is not None else schedules:
            record = QuadrantRecord(team_id=team_id)
            for g in schedules.get(team_id, []):
                opp_rank = ranks.get(g.opponent_id)
                if opp_rank is None:
                    continue
                record.add(classify_quadrant(opp_rank, g.location), g.is_win)
            records[team_id] = record
        return records
