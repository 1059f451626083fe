"""Error and warning types raised by the ratings engine."""

from typing import Iterable, List


class InsufficientDataError(ValueError):
    """Raised when a team has no eligible games to rate.

    Non-fatal: the run excludes the team from ranked output and reports it.
    """

    def __init__(self, team_id: str, message: str = ""):
        self.team_id = team_id
        super().__init__(message or f"Team {team_id} has zero eligible games")


class ConvergenceWarning(UserWarning):
    """Adjusted-efficiency iteration hit its cap before meeting epsilon."""


class OpponentGraphError(ValueError):
    """Raised when games reference teams missing from the Team Directory."""

    def __init__(self, unknown_team_ids: Iterable[str]):
        self.unknown_team_ids: List[str] = sorted(set(unknown_team_ids))
        super().__init__(
            "Games reference teams missing from the Team Directory: "
            + ", ".join(self.unknown_team_ids)
        )
