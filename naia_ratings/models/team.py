"""Team model for the ratings engine."""

from dataclasses import dataclass
from typing import Optional


LEAGUES = ("mens", "womens")


@dataclass(frozen=True)
class Team:
    """A member of the Team Directory.

    Conference membership is fixed for the duration of one rating run.
    Ineligible teams (non-NAIA opponents kept for schedule strength) stay in
    the opponent graph but never receive a rank.
    """

    team_id: str
    name: str
    conference: str
    league: str = "mens"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: str = ""
    state: str = ""
    is_eligible: bool = True

    def __post_init__(self):
        """Validate team data."""
        if not self.team_id:
            raise ValueError("Team requires a non-empty team_id")

        if self.league not in LEAGUES:
            raise ValueError(f"Invalid league: {self.league}")

        if (self.latitude is None) != (self.longitude is None):
            raise ValueError(f"Team {self.team_id} has only one of latitude/longitude")

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        """Convert team to dictionary."""
        return {
            "team_id": self.team_id,
            "name": self.name,
            "conference": self.conference,
            "league": self.league,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.city,
            "state": self.state,
            "is_eligible": self.is_eligible,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Team":
        """Create team from dictionary."""
        lat = data.get("latitude")
        lon = data.get("longitude")
        return cls(
            team_id=str(data["team_id"]),
            name=data.get("name") or str(data["team_id"]),
            conference=data.get("conference") or "",
            league=data.get("league", "mens"),
            latitude=float(lat) if lat is not None else None,
            longitude=float(lon) if lon is not None else None,
            city=data.get("city", ""),
            state=data.get("state", ""),
            is_eligible=bool(data.get("is_eligible", True)),
        )
