"""Game models: a completed game and the per-team rows derived from it."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Location(str, Enum):
    """Game site relative to the team the row belongs to."""

    HOME = "home"
    AWAY = "away"
    NEUTRAL = "neutral"

    def flipped(self) -> "Location":
        if self is Location.HOME:
            return Location.AWAY
        if self is Location.AWAY:
            return Location.HOME
        return Location.NEUTRAL


@dataclass(frozen=True)
class TeamBox:
    """One side's box-score counting stats (0 when unavailable)."""

    fgm: float = 0.0
    fga: float = 0.0
    fg3m: float = 0.0
    fg3a: float = 0.0
    ftm: float = 0.0
    fta: float = 0.0
    oreb: float = 0.0
    dreb: float = 0.0
    tov: float = 0.0

    def to_dict(self) -> dict:
        return {
            "fgm": self.fgm,
            "fga": self.fga,
            "fg3m": self.fg3m,
            "fg3a": self.fg3a,
            "ftm": self.ftm,
            "fta": self.fta,
            "oreb": self.oreb,
            "dreb": self.dreb,
            "tov": self.tov,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "TeamBox":
        data = data or {}
        return cls(**{k: float(data.get(k) or 0.0) for k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class GameRecord:
    """One team-side row from a single game."""

    game_id: str
    game_date: str  # YYYY-MM-DD
    team_id: str
    opponent_id: str
    location: Location
    points: int
    opp_points: int
    box: TeamBox
    opp_box: TeamBox
    is_conference: bool = False
    is_postseason: bool = False

    @property
    def is_win(self) -> bool:
        return self.points > self.opp_points


@dataclass
class Game:
    """A game as supplied by the Game Store Reader.

    ``location`` is relative to ``team_id``. Each game contributes one
    :class:`GameRecord` to each team's schedule, with the location flipped
    for the opponent side.
    """

    game_id: str
    game_date: str
    team_id: str
    opponent_id: str
    team_score: Optional[int]
    opponent_score: Optional[int]
    location: Location = Location.NEUTRAL
    team_box: TeamBox = field(default_factory=TeamBox)
    opponent_box: TeamBox = field(default_factory=TeamBox)
    is_conference: bool = False
    is_postseason: bool = False
    is_exhibition: bool = False
    is_naia: bool = True
    is_national_tournament: bool = False
    is_completed: bool = True

    def __post_init__(self):
        """Validate game data."""
        if not isinstance(self.location, Location):
            self.location = Location(self.location)

        if self.team_id == self.opponent_id:
            raise ValueError(f"Game {self.game_id} has the same team on both sides")

        if self.is_completed:
            if self.team_score is None or self.opponent_score is None:
                raise ValueError(f"Completed game {self.game_id} is missing a final score")
            if self.team_score == self.opponent_score:
                raise ValueError(f"Completed game {self.game_id} cannot end tied")

    def is_eligible(self, include_national_tournament: bool = False) -> bool:
        """Whether the game feeds the ratings engine."""
        if not self.is_completed or self.is_exhibition or not self.is_naia:
            return False
        if self.is_national_tournament and not include_national_tournament:
            return False
        return True

    @property
    def winner_id(self) -> Optional[str]:
        if not self.is_completed:
            return None
        return self.team_id if self.team_score > self.opponent_score else self.opponent_id

    def records(self) -> Tuple[GameRecord, GameRecord]:
        """Return the (team side, opponent side) rows for this game."""
        team_side = GameRecord(
            game_id=self.game_id,
            game_date=self.game_date,
            team_id=self.team_id,
            opponent_id=self.opponent_id,
            location=self.location,
            points=self.team_score,
            opp_points=self.opponent_score,
            box=self.team_box,
            opp_box=self.opponent_box,
            is_conference=self.is_conference,
            is_postseason=self.is_postseason,
        )
        opponent_side = GameRecord(
            game_id=self.game_id,
            game_date=self.game_date,
            team_id=self.opponent_id,
            opponent_id=self.team_id,
            location=self.location.flipped(),
            points=self.opponent_score,
            opp_points=self.team_score,
            box=self.opponent_box,
            opp_box=self.team_box,
            is_conference=self.is_conference,
            is_postseason=self.is_postseason,
        )
        return team_side, opponent_side

    def to_dict(self) -> dict:
        """Convert game to dictionary."""
        return {
            "game_id": self.game_id,
            "game_date": self.game_date,
            "team_id": self.team_id,
            "opponent_id": self.opponent_id,
            "location": self.location.value,
            "team_score": self.team_score,
            "opponent_score": self.opponent_score,
            "team_box": self.team_box.to_dict(),
            "opponent_box": self.opponent_box.to_dict(),
            "is_conference": self.is_conference,
            "is_postseason": self.is_postseason,
            "is_exhibition": self.is_exhibition,
            "is_naia": self.is_naia,
            "is_national_tournament": self.is_national_tournament,
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Game":
        """Create game from dictionary."""
        team_score = data.get("team_score")
        opponent_score = data.get("opponent_score")
        return cls(
            game_id=str(data["game_id"]),
            game_date=str(data.get("game_date", "")),
            team_id=str(data["team_id"]),
            opponent_id=str(data["opponent_id"]),
            team_score=int(team_score) if team_score is not None else None,
            opponent_score=int(opponent_score) if opponent_score is not None else None,
            location=Location(data.get("location", "neutral")),
            team_box=TeamBox.from_dict(data.get("team_box")),
            opponent_box=TeamBox.from_dict(data.get("opponent_box")),
            is_conference=bool(data.get("is_conference", False)),
            is_postseason=bool(data.get("is_postseason", False)),
            is_exhibition=bool(data.get("is_exhibition", False)),
            is_naia=bool(data.get("is_naia", True)),
            is_national_tournament=bool(data.get("is_national_tournament", False)),
            is_completed=bool(data.get("is_completed", True)),
        )
