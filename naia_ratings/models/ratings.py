"""Derived per-team and per-conference records produced by one rating run."""

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class TeamSeasonStats:
    """Cumulative box-score aggregates for one team (rates from summed totals)."""

    team_id: str
    games: int = 0
    wins: int = 0
    losses: int = 0
    win_pct: float = 0.0

    points_for: float = 0.0
    points_against: float = 0.0
    possessions: float = 0.0
    opp_possessions: float = 0.0
    pace: float = 0.0

    ortg: float = 0.0
    drtg: float = 0.0
    net_rating: float = 0.0

    # Four factors, offense
    effective_fg_pct: float = 0.0
    turnover_pct: float = 0.0
    offensive_reb_pct: float = 0.0
    free_throw_rate: float = 0.0

    # Four factors, defense
    opp_effective_fg_pct: float = 0.0
    opp_turnover_pct: float = 0.0
    defensive_reb_pct: float = 0.0
    opp_free_throw_rate: float = 0.0

    # Supplementary shooting
    fg_pct: float = 0.0
    three_pt_pct: float = 0.0
    ft_pct: float = 0.0
    three_pt_rate: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class RPIComponents:
    team_id: str
    wins: int = 0
    losses: int = 0
    win_pct: float = 0.0
    opponents_win_pct: float = 0.0
    opponents_opponents_win_pct: float = 0.0
    rpi: float = 0.0
    sos: float = 0.0
    rank: Optional[int] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class AdjustedRating:
    team_id: str
    adj_ortg: float
    adj_drtg: float
    osos: float = 0.0
    dsos: float = 0.0
    nsos: float = 0.0

    @property
    def adj_net(self) -> float:
        return self.adj_ortg - self.adj_drtg

    def to_dict(self) -> Dict:
        out = asdict(self)
        out["adj_net"] = self.adj_net
        return out


@dataclass
class QuadrantRecord:
    """Wins and losses per quadrant; index 0 is Q1."""

    team_id: str
    wins: List[int] = field(default_factory=lambda: [0, 0, 0, 0])
    losses: List[int] = field(default_factory=lambda: [0, 0, 0, 0])

    def add(self, quadrant: int, is_win: bool) -> None:
        if not 1 <= quadrant <= 4:
            raise ValueError(f"Quadrant must be between 1 and 4, got {quadrant}")
        if is_win:
            self.wins[quadrant - 1] += 1
        else:
            self.losses[quadrant - 1] += 1

    def record(self, quadrant: int) -> Tuple[int, int]:
        return self.wins[quadrant - 1], self.losses[quadrant - 1]

    def to_dict(self) -> Dict:
        out: Dict = {"team_id": self.team_id}
        for q in range(1, 5):
            out[f"q{q}_wins"], out[f"q{q}_losses"] = self.record(q)
        return out


@dataclass
class CompositeRanking:
    team_id: str
    qwp: float = 0.0
    qwi: float = 0.0
    pcr: Optional[int] = None
    pcr_avg: Optional[float] = None
    power_index: Optional[float] = None
    projected_rank: Optional[int] = None
    is_conference_champion: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ConferenceRollup:
    conference: str
    area: str = "Unknown"
    team_count: int = 0
    avg_adj_net: float = 0.0
    avg_rpi: float = 0.0
    avg_adj_ortg: float = 0.0
    avg_adj_drtg: float = 0.0
    avg_sos: float = 0.0
    non_conf_wins: int = 0
    non_conf_losses: int = 0
    non_conf_win_pct: float = 0.0
    top_half_adj_net: Optional[float] = None
    best_rpi_rank: Optional[int] = None
    worst_rpi_rank: Optional[int] = None
    adj_net_rank: Optional[int] = None

    def to_dict(self) -> Dict:
        return asdict(self)
