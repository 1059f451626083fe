"""Bracket projection model: seed tiers and opening-round pods."""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PodEntry:
    """A team placed in a pod, with its travel to the host site."""

    team_id: str
    name: str
    conference: str
    seed: int
    rank: int
    distance: float = 0.0
    conference_relaxed: bool = False
    nearest_hosts: List[Dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "name": self.name,
            "conference": self.conference,
            "seed": self.seed,
            "rank": self.rank,
            "distance": None if math.isinf(self.distance) else round(self.distance, 1),
            "conference_relaxed": self.conference_relaxed,
            "nearest_hosts": self.nearest_hosts,
        }


@dataclass
class Pod:
    """One host plus one slot per visiting seed line (None when unfilled)."""

    pod_number: int
    host: PodEntry
    slots: Dict[int, Optional[PodEntry]] = field(default_factory=dict)

    def __post_init__(self):
        if self.host.seed != 1:
            raise ValueError(f"Pod host must be a 1 seed, got {self.host.seed}")

    @property
    def visitors(self) -> List[PodEntry]:
        return [entry for _, entry in sorted(self.slots.items()) if entry is not None]

    @property
    def teams(self) -> List[PodEntry]:
        return [self.host] + self.visitors

    @property
    def conferences(self) -> List[str]:
        return [entry.conference for entry in self.teams]

    def is_open(self, seed: int) -> bool:
        return seed in self.slots and self.slots[seed] is None

    def place(self, entry: PodEntry) -> None:
        if not self.is_open(entry.seed):
            raise ValueError(f"Pod {self.pod_number} has no open slot for seed {entry.seed}")
        self.slots[entry.seed] = entry

    def to_dict(self) -> dict:
        return {
            "pod_number": self.pod_number,
            "host": self.host.to_dict(),
            "slots": {
                str(seed): entry.to_dict() if entry is not None else None
                for seed, entry in sorted(self.slots.items())
            },
        }


@dataclass
class BracketProjection:
    """Ordered seed tiers (team ids, best first) and the pods built from them."""

    league: str
    season: str
    seeded_by: str
    tiers: List[List[str]] = field(default_factory=list)
    pods: List[Pod] = field(default_factory=list)

    def tier_of(self, team_id: str) -> Optional[int]:
        for idx, tier in enumerate(self.tiers):
            if team_id in tier:
                return idx + 1
        return None

    def to_dict(self) -> dict:
        """Convert bracket projection to dictionary."""
        return {
            "league": self.league,
            "season": self.season,
            "seeded_by": self.seeded_by,
            "tiers": [list(tier) for tier in self.tiers],
            "pods": [pod.to_dict() for pod in self.pods],
        }
