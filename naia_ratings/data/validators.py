"""Schema validators for Team Directory and Game Store payloads."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..models.game import Location
from ..models.team import LEAGUES

_LOCATIONS = {loc.value for loc in Location}


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_teams_payload(payload: Dict) -> List[str]:
    errors: List[str] = []
    teams = payload.get("teams")
    if not isinstance(teams, list) or not teams:
        return ["teams payload must include non-empty 'teams' list"]

    required = ("team_id", "name")
    seen = set()
    for idx, row in enumerate(teams):
        if not isinstance(row, dict):
            errors.append(f"teams[{idx}] must be an object")
            continue
        missing = [k for k in required if not row.get(k)]
        if missing:
            errors.append(f"teams[{idx}] missing fields: {', '.join(missing)}")
            continue

        team_id = str(row["team_id"])
        if team_id in seen:
            errors.append(f"teams[{idx}] duplicate team_id '{team_id}'")
        seen.add(team_id)

        league = row.get("league", "mens")
        if league not in LEAGUES:
            errors.append(f"teams[{idx}] invalid league '{league}'")

        lat, lon = row.get("latitude"), row.get("longitude")
        if (lat is None) != (lon is None):
            errors.append(f"teams[{idx}] must give both latitude and longitude or neither")
        elif lat is not None and (_to_float(lat) is None or _to_float(lon) is None):
            errors.append(f"teams[{idx}] has non-numeric coordinates")
    return errors


def validate_games_payload(payload: Dict) -> List[str]:
    errors: List[str] = []
    games = payload.get("games")
    if not isinstance(games, list) or not games:
        return ["games payload must include non-empty 'games' list"]

    seen = set()
    for idx, row in enumerate(games):
        if not isinstance(row, dict):
            errors.append(f"games[{idx}] must be an object")
            continue
        game_id = row.get("game_id")
        if not game_id:
            errors.append(f"games[{idx}] missing game id")
        elif str(game_id) in seen:
            errors.append(f"games[{idx}] duplicate game_id '{game_id}'")
        else:
            seen.add(str(game_id))
        if not row.get("team_id"):
            errors.append(f"games[{idx}] missing team_id")
        if not row.get("opponent_id"):
            errors.append(f"games[{idx}] missing opponent_id")

        location = row.get("location", "neutral")
        if location not in _LOCATIONS:
            errors.append(f"games[{idx}] invalid location '{location}'")

        if row.get("is_completed", True):
            team_score = _to_float(row.get("team_score"))
            opp_score = _to_float(row.get("opponent_score"))
            if team_score is None or opp_score is None:
                errors.append(f"games[{idx}] completed game missing/invalid score")
            elif team_score == opp_score:
                errors.append(f"games[{idx}] completed game cannot end tied")

        for side in ("team_box", "opponent_box"):
            box = row.get(side)
            if box is None:
                continue
            if not isinstance(box, dict):
                errors.append(f"games[{idx}] {side} must be an object")
                continue
            bad = [k for k, v in box.items() if v is not None and _to_float(v) is None]
            if bad:
                errors.append(f"games[{idx}] {side} has non-numeric fields: {', '.join(sorted(bad))}")
    return errors
