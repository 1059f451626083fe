"""Data loader for the Team Directory and Game Store (JSON-backed)."""

import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np

from ..models.game import Game
from ..models.team import Team
from ..ratings.conferences import CONFERENCE_AREAS
from .validators import validate_games_payload, validate_teams_payload

logger = logging.getLogger(__name__)

# Rough geographic centre of each selection area, for synthetic campuses
AREA_CENTERS = {
    "East": (35.0, -84.0),
    "Midwest": (39.0, -95.5),
    "North": (42.0, -86.5),
    "South": (32.5, -94.0),
    "West": (44.5, -118.0),
}


class DataLoader:
    """Loads teams and games from JSON files."""

    @staticmethod
    def _read(file_path: str) -> Dict:
        with open(file_path, "r") as f:
            return json.load(f)

    @staticmethod
    def load_teams_from_json(file_path: str) -> List[Team]:
        """
        Load the Team Directory from a ``{"teams": [...]}`` JSON file.

        Raises:
            ValueError: if the payload fails validation.
        """
        data = DataLoader._read(file_path)
        errors = validate_teams_payload(data)
        if errors:
            raise ValueError(f"Invalid teams payload {file_path}: " + "; ".join(errors))

        teams = [Team.from_dict(row) for row in data["teams"]]
        logger.info("Loaded %d teams from %s", len(teams), file_path)
        return teams

    @staticmethod
    def load_games_from_json(file_path: str) -> List[Game]:
        """
        Load games from a ``{"games": [...]}`` JSON file.

        Raises:
            ValueError: if the payload fails validation.
        """
        data = DataLoader._read(file_path)
        errors = validate_games_payload(data)
        if errors:
            raise ValueError(f"Invalid games payload {file_path}: " + "; ".join(errors))

        games = [Game.from_dict(row) for row in data["games"]]
        logger.info("Loaded %d games from %s", len(games), file_path)
        return games

    @staticmethod
    def save_teams_to_json(teams: List[Team], file_path: str) -> None:
        with open(file_path, "w") as f:
            json.dump({"teams": [t.to_dict() for t in teams]}, f, indent=2)

    @staticmethod
    def save_games_to_json(games: List[Game], file_path: str) -> None:
        with open(file_path, "w") as f:
            json.dump({"games": [g.to_dict() for g in games]}, f, indent=2)

    @staticmethod
    def create_sample_data(
        output_dir: str,
        league: str = "mens",
        teams_per_conference: int = 4,
        non_conference_games: int = 12,
        season_start: date = date(2025, 11, 1),
        seed: int = 2026,
    ) -> Tuple[str, str]:
        """
        Create a synthetic league for testing: every conference in
        ``CONFERENCE_AREAS``, a home-and-away conference round robin, random
        non-conference games, and one conference tournament final each.

        Returns:
            (teams JSON path, games JSON path)
        """
        rng = np.random.default_rng(seed)
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)

        teams: List[Team] = []
        strength: Dict[str, float] = {}
        for conf_idx, (conference, area) in enumerate(sorted(CONFERENCE_AREAS.items())):
            lat0, lon0 = AREA_CENTERS[area]
            short = conference.replace(" Athletic Conference", "").replace(" Conference", "")
            for k in range(teams_per_conference):
                team_id = f"{league[0]}{conf_idx:02d}{k}"
                team = Team(
                    team_id=team_id,
                    name=f"{short} College {k + 1}",
                    conference=conference,
                    league=league,
                    latitude=round(float(lat0 + rng.uniform(-2.5, 2.5)), 4),
                    longitude=round(float(lon0 + rng.uniform(-3.0, 3.0)), 4),
                )
                teams.append(team)
                strength[team_id] = float(rng.normal(0.0, 6.0))

        games: List[Game] = []

        def play(team: Team, opponent: Team, day: int, location: str, **flags) -> None:
            games.append(
                _synthetic_game(
                    rng,
                    game_id=f"{league}-{len(games) + 1:05d}",
                    game_date=(season_start + timedelta(days=day)).isoformat(),
                    team=team,
                    opponent=opponent,
                    edge=strength[team.team_id] - strength[opponent.team_id],
                    location=location,
                    **flags,
                )
            )

        by_conference: Dict[str, List[Team]] = {}
        for team in teams:
            by_conference.setdefault(team.conference, []).append(team)

        for idx in range(len(teams) * non_conference_games // 2):
            team, opponent = rng.choice(len(teams), size=2, replace=False)
            if teams[team].conference == teams[opponent].conference:
                continue
            location = str(rng.choice(["home", "away", "neutral"], p=[0.45, 0.45, 0.10]))
            play(teams[team], teams[opponent], int(idx % 50), location)

        for members in by_conference.values():
            day = 60
            for i, team in enumerate(members):
                for opponent in members[i + 1:]:
                    play(team, opponent, day, "home", is_conference=True)
                    play(opponent, team, day + 30, "home", is_conference=True)
                    day += 3

            top_two = sorted(members, key=lambda t: -strength[t.team_id])[:2]
            if len(top_two) == 2:
                play(top_two[0], top_two[1], 121, "neutral", is_conference=True, is_postseason=True)

        teams_path = str(out / f"teams_{league}.json")
        games_path = str(out / f"games_{league}.json")
        DataLoader.save_teams_to_json(teams, teams_path)
        DataLoader.save_games_to_json(games, games_path)
        logger.info("Wrote %d sample teams and %d games to %s", len(teams), len(games), out)
        return teams_path, games_path


def _synthetic_box(rng: np.random.Generator, possessions: int, edge: float) -> Tuple[Dict, int]:
    tov = int(rng.binomial(possessions, 0.17))
    fta = int(rng.binomial(possessions, 0.30))
    ftm = int(rng.binomial(fta, 0.70))
    oreb = int(rng.integers(5, 15))
    fga = max(int(possessions - tov - 0.475 * fta + oreb), 30)
    fg3a = int(rng.binomial(fga, 0.36))
    p2 = float(np.clip(0.49 + edge / 150.0, 0.35, 0.65))
    p3 = float(np.clip(0.33 + edge / 250.0, 0.22, 0.45))
    fg3m = int(rng.binomial(fg3a, p3))
    fg2m = int(rng.binomial(fga - fg3a, p2))
    dreb = int(rng.integers(20, 32))
    box = {
        "fgm": fg2m + fg3m,
        "fga": fga,
        "fg3m": fg3m,
        "fg3a": fg3a,
        "ftm": ftm,
        "fta": fta,
        "oreb": oreb,
        "dreb": dreb,
        "tov": tov,
    }
    return box, 2 * fg2m + 3 * fg3m + ftm


def _synthetic_game(
    rng: np.random.Generator,
    game_id: str,
    game_date: str,
    team: Team,
    opponent: Team,
    edge: float,
    location: str,
    is_conference: bool = False,
    is_postseason: bool = False,
) -> Game:
    home_edge = {"home": 1.75, "away": -1.75}.get(location, 0.0)
    possessions = int(rng.integers(62, 78))
    team_box, team_score = _synthetic_box(rng, possessions, edge + home_edge)
    opp_box, opp_score = _synthetic_box(rng, possessions, -edge - home_edge)
    if team_score == opp_score:
        team_box["ftm"] += 1
        team_box["fta"] += 1
        team_score += 1
    return Game.from_dict(
        {
            "game_id": game_id,
            "game_date": game_date,
            "team_id": team.team_id,
            "opponent_id": opponent.team_id,
            "location": location,
            "team_score": team_score,
            "opponent_score": opp_score,
            "team_box": team_box,
            "opponent_box": opp_box,
            "is_conference": is_conference,
            "is_postseason": is_postseason,
        }
    )
