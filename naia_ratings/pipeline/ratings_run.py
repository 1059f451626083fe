"""
Ratings run: one league, one season, every derived record recomputed from
the full set of completed games.

Steps run strictly in dependency order, each consuming the complete output
of the one before it:

    games -> four factors -> RPI -> adjusted efficiency -> quadrants
          -> composite rankings / conference rollups -> bracket

Nothing is persisted here. ``run_ratings_to_store`` hands a finished run to
the store, so a fatal error anywhere leaves the previous output untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from ..bracket.pods import build_bracket_projection
from ..data.store import RatingsStore
from ..models.bracket import BracketProjection
from ..models.game import Game, GameRecord
from ..models.ratings import (
    AdjustedRating,
    CompositeRanking,
    ConferenceRollup,
    QuadrantRecord,
    RPIComponents,
    TeamSeasonStats,
)
from ..models.team import LEAGUES, Team
from ..ratings.adjusted_efficiency import AdjustedEfficiencySolver, build_schedule
from ..ratings.composite import CompositeRankingEngine, find_conference_champions
from ..ratings.conferences import CONFERENCE_AREAS, conference_rollups
from ..ratings.directionality import percentile_table
from ..ratings.errors import OpponentGraphError
from ..ratings.four_factors import FourFactorAggregator
from ..ratings.quadrants import QuadrantClassifier
from ..ratings.rpi import RPISolver

logger = logging.getLogger(__name__)

SEED_BY_OPTIONS = ("rpi", "projected_rank")

PERCENTILE_METRICS = (
    "adj_ortg",
    "adj_drtg",
    "adj_net",
    "rpi",
    "sos",
    "win_pct",
    "power_index",
    "pace",
    "effective_fg_pct",
    "turnover_pct",
    "offensive_reb_pct",
    "free_throw_rate",
    "opp_effective_fg_pct",
    "opp_turnover_pct",
    "defensive_reb_pct",
    "opp_free_throw_rate",
)


@dataclass
class RatingsRunConfig:
    """Run configuration knobs."""

    league: str = "mens"
    season: str = "2025-26"

    adjustment_factor: float = AdjustedEfficiencySolver.ADJUSTMENT_FACTOR
    hca: float = AdjustedEfficiencySolver.HCA_POINTS
    epsilon: float = AdjustedEfficiencySolver.EPSILON
    max_iterations: int = AdjustedEfficiencySolver.MAX_ITERATIONS

    include_national_tournament: bool = False
    field_size: int = CompositeRankingEngine.FIELD_SIZE

    seed_by: str = "rpi"
    tier_count: int = 4
    tier_size: int = 16

    output_dir: str = "data/ratings"

    def __post_init__(self):
        if self.league not in LEAGUES:
            raise ValueError(f"Invalid league: {self.league}")
        if self.seed_by not in SEED_BY_OPTIONS:
            raise ValueError(f"seed_by must be one of {SEED_BY_OPTIONS}, got {self.seed_by}")
        if self.tier_count < 1 or self.tier_size < 1:
            raise ValueError("tier_count and tier_size must be positive")


@dataclass
class RunSummary:
    league: str
    season: str
    team_count: int = 0
    ranked_count: int = 0
    game_count: int = 0
    iterations: int = 0
    converged: bool = True
    max_delta: float = 0.0
    excluded_team_ids: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "league": self.league,
            "season": self.season,
            "team_count": self.team_count,
            "ranked_count": self.ranked_count,
            "game_count": self.game_count,
            "iterations": self.iterations,
            "converged": self.converged,
            "max_delta": self.max_delta,
            "excluded_team_ids": list(self.excluded_team_ids),
            "warnings": list(self.warnings),
        }


@dataclass
class RatingsRun:
    """Everything one run produced, keyed by team id where per-team."""

    config: RatingsRunConfig
    summary: RunSummary
    teams: Dict[str, Team]
    stats: Dict[str, TeamSeasonStats]
    rpi: Dict[str, RPIComponents]
    adjusted: Dict[str, AdjustedRating]
    quadrants: Dict[str, QuadrantRecord]
    composite: Dict[str, CompositeRanking]
    conferences: List[ConferenceRollup]
    bracket: BracketProjection
    percentiles: Dict[str, Dict[str, Optional[int]]] = field(default_factory=dict)

    @property
    def ranked_team_ids(self) -> List[str]:
        """Ranked teams, best RPI first."""
        ranked = [t for t, row in self.rpi.items() if row.rank is not None]
        return sorted(ranked, key=lambda t: self.rpi[t].rank)

    def team_row(self, team_id: str) -> Dict:
        """Flat record of every per-team number for one ranked team."""
        team = self.teams[team_id]
        row: Dict = {
            "team_id": team_id,
            "name": team.name,
            "conference": team.conference,
            "area": CONFERENCE_AREAS.get(team.conference, "Unknown"),
        }
        row.update(self.stats[team_id].to_dict())

        rpi = self.rpi[team_id].to_dict()
        rpi["rpi_rank"] = rpi.pop("rank")
        row.update(rpi)

        if team_id in self.adjusted:
            row.update(self.adjusted[team_id].to_dict())
        row.update(self.quadrants[team_id].to_dict())
        row.update(self.composite[team_id].to_dict())
        row["seed_tier"] = self.bracket.tier_of(team_id)
        return row

    def team_rows(self) -> List[Dict]:
        return [self.team_row(t) for t in self.ranked_team_ids]

    def to_frame(self) -> pd.DataFrame:
        """One row per ranked team, percentiles as ``<metric>_pctile`` columns."""
        rows = []
        for row in self.team_rows():
            flat = dict(row)
            for metric, value in self.percentiles.get(row["team_id"], {}).items():
                flat[f"{metric}_pctile"] = value
            rows.append(flat)
        return pd.DataFrame(rows)

    def to_dict(self) -> Dict:
        teams = []
        for row in self.team_rows():
            row["percentiles"] = self.percentiles.get(row["team_id"], {})
            teams.append(row)
        return {
            "league": self.config.league,
            "season": self.config.season,
            "summary": self.summary.to_dict(),
            "teams": teams,
            "conferences": [c.to_dict() for c in self.conferences],
            "bracket": self.bracket.to_dict(),
        }


def validate_opponent_graph(teams: Dict[str, Team], games: Iterable[Game]) -> None:
    """Raise :class:`OpponentGraphError` if any game names an unknown team."""
    unknown: Set[str] = set()
    for game in games:
        for team_id in (game.team_id, game.opponent_id):
            if team_id not in teams:
                unknown.add(team_id)
    if unknown:
        raise OpponentGraphError(unknown)


def build_schedules(
    team_ids: Iterable[str], games: Iterable[Game], include_national_tournament: bool = False
) -> Tuple[Dict[str, List[GameRecord]], int]:
    """
    Expand eligible games into per-team rows.

    Returns:
        (team_id -> rows ordered by date, number of eligible games)
    """
    schedules: Dict[str, List[GameRecord]] = {t: [] for t in team_ids}
    seen: Set[str] = set()
    for game in games:
        if not game.is_eligible(include_national_tournament):
            continue
        if game.game_id in seen:
            logger.warning("Skipping duplicate game %s", game.game_id)
            continue
        seen.add(game.game_id)
        for record in game.records():
            schedules[record.team_id].append(record)
    for rows in schedules.values():
        rows.sort(key=lambda g: (g.game_date, g.game_id))
    return schedules, len(seen)


class RatingsPipeline:
    """Computes every derived record for one league and season."""

    def __init__(self, config: Optional[RatingsRunConfig] = None):
        self.config = config or RatingsRunConfig()
        self.aggregator = FourFactorAggregator()
        self.rpi_solver = RPISolver()
        self.efficiency_solver = AdjustedEfficiencySolver(
            adjustment_factor=self.config.adjustment_factor,
            hca=self.config.hca,
            epsilon=self.config.epsilon,
            max_iterations=self.config.max_iterations,
        )
        self.quadrant_classifier = QuadrantClassifier()
        self.composite_engine = CompositeRankingEngine(field_size=self.config.field_size)

    def run(
        self,
        teams: Iterable[Team],
        games: Iterable[Game],
        champions: Optional[Iterable[str]] = None,
    ) -> RatingsRun:
        """
        Args:
            teams: the Team Directory (any league; filtered to the run's league).
            games: every game of the season for this league.
            champions: explicit conference champions. Derived from postseason
                conference games when omitted.

        Raises:
            OpponentGraphError: a game references a team outside the league's
                directory. Raised before any computation.
        """
        cfg = self.config
        directory = {t.team_id: t for t in teams}
        league_teams = {t: team for t, team in directory.items() if team.league == cfg.league}
        games = list(games)
        validate_opponent_graph(directory, games)
        games = [g for g in games if g.team_id in league_teams or g.opponent_id in league_teams]
        validate_opponent_graph(league_teams, games)

        summary = RunSummary(league=cfg.league, season=cfg.season, team_count=len(league_teams))
        names = {t: team.name for t, team in league_teams.items()}

        schedules, summary.game_count = build_schedules(
            sorted(league_teams), games, cfg.include_national_tournament
        )
        logger.info(
            "Rating %s %s: %d teams, %d eligible games",
            cfg.league, cfg.season, len(league_teams), summary.game_count,
        )

        stats, excluded = self.aggregator.aggregate_all(schedules)
        for exc in excluded:
            summary.excluded_team_ids.append(exc.team_id)
            summary.warnings.append(str(exc))
        rated = {t: schedules[t] for t in stats}

        rankable = [t for t in rated if league_teams[t].is_eligible]
        rpi = self.rpi_solver.solve(rated, names=names, rankable=rankable)
        ranks = {t: row.rank for t, row in rpi.items()}
        ranked_ids = sorted((t for t in rpi if ranks[t] is not None), key=lambda t: ranks[t])
        summary.ranked_count = len(ranked_ids)

        solved = self.efficiency_solver.solve(
            {t: (s.ortg, s.drtg) for t, s in stats.items()},
            build_schedule(rated),
        )
        summary.iterations = solved.iterations
        summary.converged = solved.converged
        summary.max_delta = solved.max_delta
        if not solved.converged:
            summary.warnings.append(
                f"Adjusted ratings stopped at the {solved.iterations}-iteration cap "
                f"(max change {solved.max_delta:.4f})"
            )

        quadrants = self.quadrant_classifier.classify(rated, ranks, team_ids=ranked_ids)

        if champions is None:
            champions = find_conference_champions(
                (g for g in games if g.is_eligible(cfg.include_national_tournament)), league_teams
            )
        champions = set(champions) & set(ranked_ids)

        composite = self.composite_engine.compute(
            ranked_ids, names, rpi, quadrants, solved.ratings, champions=champions
        )
        conferences = conference_rollups(league_teams, ranked_ids, rpi, solved.ratings, rated)

        bracket = self._bracket(ranked_ids, league_teams, rpi, composite)
        for pod in bracket.pods:
            for entry in pod.visitors:
                if entry.conference_relaxed:
                    summary.warnings.append(
                        f"Conference constraint relaxed for {entry.team_id} in pod {pod.pod_number}"
                    )

        run = RatingsRun(
            config=cfg,
            summary=summary,
            teams=league_teams,
            stats=stats,
            rpi=rpi,
            adjusted=solved.ratings,
            quadrants=quadrants,
            composite=composite,
            conferences=conferences,
            bracket=bracket,
        )
        run.percentiles = percentile_table(run.team_rows(), PERCENTILE_METRICS)

        logger.info(
            "Run complete: %d ranked, %d excluded, converged=%s",
            summary.ranked_count, len(summary.excluded_team_ids), summary.converged,
        )
        return run

    def _bracket(
        self,
        ranked_ids: List[str],
        teams: Dict[str, Team],
        rpi: Dict[str, RPIComponents],
        composite: Dict[str, CompositeRanking],
    ) -> BracketProjection:
        cfg = self.config
        if cfg.seed_by == "projected_rank":
            ranks = {t: composite[t].projected_rank for t in ranked_ids}
        else:
            ranks = {t: rpi[t].rank for t in ranked_ids}
        ordered = sorted(ranked_ids, key=lambda t: ranks[t])
        return build_bracket_projection(
            league=cfg.league,
            season=cfg.season,
            ordered_team_ids=ordered,
            teams=teams,
            ranks=ranks,
            seeded_by=cfg.seed_by,
            tier_count=cfg.tier_count,
            tier_size=cfg.tier_size,
        )


def run_ratings(
    teams: Iterable[Team],
    games: Iterable[Game],
    config: Optional[RatingsRunConfig] = None,
    champions: Optional[Iterable[str]] = None,
) -> RatingsRun:
    return RatingsPipeline(config).run(teams, games, champions=champions)


def run_ratings_to_store(
    teams: Iterable[Team],
    games: Iterable[Game],
    config: RatingsRunConfig,
    champions: Optional[Iterable[str]] = None,
) -> RatingsRun:
    """Execute a run and commit it to ``config.output_dir``."""
    run = run_ratings(teams, games, config, champions)
    RatingsStore(config.output_dir).commit(run)
    return run
