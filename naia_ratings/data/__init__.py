"""Team Directory / Game Store readers and the Ratings Store."""

from .loader import DataLoader
from .store import RatingsStore
from .validators import validate_games_payload, validate_teams_payload

__all__ = ["DataLoader", "RatingsStore", "validate_games_payload", "validate_teams_payload"]
