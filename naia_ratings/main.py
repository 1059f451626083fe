"""Main CLI interface for the NAIA ratings engine."""

import argparse
import logging
import sys

from .data.loader import DataLoader
from .models.team import LEAGUES
from .pipeline.ratings_run import SEED_BY_OPTIONS, RatingsRun, RatingsRunConfig, run_ratings_to_store
from .ratings.adjusted_efficiency import AdjustedEfficiencySolver
from .ratings.errors import OpponentGraphError


def print_summary(run: RatingsRun, top: int = 10) -> None:
    summary = run.summary
    print(f"\n{'=' * 60}")
    print(f"{summary.league.upper()} {summary.season}: {summary.ranked_count} ranked teams, {summary.game_count} games")
    print(f"{'=' * 60}")

    status = "converged" if summary.converged else "hit iteration cap"
    print(f"Adjusted ratings {status} after {summary.iterations} iterations")

    print(f"\nTop {top} by RPI:")
    for team_id in run.ranked_team_ids[:top]:
        rpi = run.rpi[team_id]
        adj = run.adjusted[team_id]
        print(
            f"  {rpi.rank:>3}. {run.teams[team_id].name:<32} "
            f"RPI {rpi.rpi:.4f}  AdjNET {adj.adj_net:+6.1f}  ({rpi.wins}-{rpi.losses})"
        )

    if summary.warnings:
        print(f"\nWarnings ({len(summary.warnings)}):")
        for message in summary.warnings:
            print(f"  - {message}")


def rate(args):
    """Compute ratings for one or more leagues and commit them."""
    print(f"Loading teams from {args.teams} and games from {args.games}...")
    try:
        teams = DataLoader.load_teams_from_json(args.teams)
        games = DataLoader.load_games_from_json(args.games)
    except (OSError, ValueError) as e:
        print(f"Error loading data: {e}")
        return 1

    print(f"Loaded {len(teams)} teams and {len(games)} games")

    for league in args.league or ["mens"]:
        config = RatingsRunConfig(
            league=league,
            season=args.season,
            adjustment_factor=args.adjustment_factor,
            hca=args.hca,
            epsilon=args.epsilon,
            max_iterations=args.max_iterations,
            include_national_tournament=args.include_national_tournament,
            seed_by=args.seed_by,
            output_dir=args.output_dir,
        )
        try:
            run = run_ratings_to_store(teams, games, config)
        except OpponentGraphError as exc:
            print(f"Error: {exc}")
            return 1

        print_summary(run)

    print(f"\n✓ Ratings written to {args.output_dir}")
    return 0


def create_sample(args):
    """Create sample data files."""
    print(f"Creating sample data in {args.output_dir}...")
    teams_path, games_path = DataLoader.create_sample_data(args.output_dir, league=args.league, seed=args.seed)
    print("✓ Sample data created!")
    print("\nYou can now compute ratings with:")
    print(f"  naia-ratings rate --teams {teams_path} --games {games_path} --league {args.league}")
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="NAIA basketball ratings - RPI, adjusted efficiency, quadrants and bracket projection"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    rate_parser = subparsers.add_parser("rate", help="Compute ratings and write them to the ratings store")
    rate_parser.add_argument("--teams", "-t", required=True, help="Team Directory JSON")
    rate_parser.add_argument("--games", "-g", required=True, help="Games JSON")
    rate_parser.add_argument(
        "--league",
        action="append",
        choices=LEAGUES,
        help="League to rate (repeatable; default: mens)",
    )
    rate_parser.add_argument("--season", default="2025-26", help="Season label (default: 2025-26)")
    rate_parser.add_argument("--output-dir", "-o", default="data/ratings", help="Ratings store directory")
    rate_parser.add_argument(
        "--adjustment-factor",
        type=float,
        default=AdjustedEfficiencySolver.ADJUSTMENT_FACTOR,
        help="Share of the opponent-strength gap applied per pass",
    )
    rate_parser.add_argument(
        "--hca",
        type=float,
        default=AdjustedEfficiencySolver.HCA_POINTS,
        help="Home-court advantage in points per 100 possessions",
    )
    rate_parser.add_argument("--epsilon", type=float, default=AdjustedEfficiencySolver.EPSILON, help="Convergence tolerance")
    rate_parser.add_argument(
        "--max-iterations", type=int, default=AdjustedEfficiencySolver.MAX_ITERATIONS, help="Iteration cap"
    )
    rate_parser.add_argument("--seed-by", choices=SEED_BY_OPTIONS, default="rpi", help="Ordering used for seed tiers")
    rate_parser.add_argument(
        "--include-national-tournament",
        action="store_true",
        help="Count national tournament games in the ratings",
    )
    rate_parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sample_parser = subparsers.add_parser("sample", help="Create sample league data")
    sample_parser.add_argument("--output-dir", "-o", default="data/sample", help="Output directory")
    sample_parser.add_argument("--league", choices=LEAGUES, default="mens")
    sample_parser.add_argument("--seed", type=int, default=2026, help="Random seed")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "rate":
        return rate(args)
    elif args.command == "sample":
        return create_sample(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
