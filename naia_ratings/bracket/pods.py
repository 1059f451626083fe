"""
Bracket seeding and opening-round pod assignment.

Greedy policy (user-visible, so the order is fixed):

1. The ranked field is cut into tiers of 16; tier k is seed line k.
2. Every tier-1 team hosts one pod. Pods are numbered by host rank.
3. Visitors are placed best seed first: all of tier 2 in rank order, then
   tier 3, then tier 4. Each pod has exactly one slot per seed line.
4. A visitor goes to the nearest host whose slot for its seed line is open
   and whose pod holds no team from the visitor's conference. Equal
   distances go to the lower pod number.
5. When every open slot conflicts on conference, the constraint is relaxed
   for that visitor only: nearest open slot, flagged ``conference_relaxed``.
6. Slots nobody fills stay ``None``.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence

from ..models.bracket import BracketProjection, Pod, PodEntry
from ..models.team import Team
from .travel_distance import nearest_sites, team_distance

logger = logging.getLogger(__name__)

TIER_COUNT = 4
TIER_SIZE = 16


def seed_tiers(ordered_team_ids: Sequence[str], tier_count: int = TIER_COUNT, tier_size: int = TIER_SIZE) -> List[List[str]]:
    """Partition the best ``tier_count * tier_size`` teams into seed tiers."""
    field = list(ordered_team_ids)[: tier_count * tier_size]
    return [field[k * tier_size:(k + 1) * tier_size] for k in range(tier_count)]


class PodAssigner:
    """Assign seed lines 2..N to tier-1 host pods by travel distance."""

    def __init__(self, nearest_host_count: int = 4):
        self.nearest_host_count = nearest_host_count

    def assign(self, tiers: List[List[str]], teams: Mapping[str, Team], ranks: Mapping[str, int]) -> List[Pod]:
        if not tiers or not tiers[0]:
            return []

        seed_lines = range(2, len(tiers) + 1)
        hosts = [teams[t] for t in tiers[0]]
        pods = [
            Pod(
                pod_number=idx + 1,
                host=self._entry(host, seed=1, rank=ranks[host.team_id]),
                slots={seed: None for seed in seed_lines},
            )
            for idx, host in enumerate(hosts)
        ]

        for seed in seed_lines:
            for team_id in tiers[seed - 1]:
                self._place(teams[team_id], seed, ranks[team_id], pods, hosts)

        relaxed = sum(1 for pod in pods for entry in pod.visitors if entry.conference_relaxed)
        logger.info("Assigned %d pods (%d conference relaxations)", len(pods), relaxed)
        return pods

    def _place(self, team: Team, seed: int, rank: int, pods: List[Pod], hosts: List[Team]) -> None:
        open_pods = [pod for pod in pods if pod.is_open(seed)]
        if not open_pods:
            raise ValueError(f"No pod has an open slot for seed {seed} ({team.team_id})")

        distances: Dict[int, float] = {
            pod.pod_number: team_distance(team, hosts[pod.pod_number - 1]) for pod in open_pods
        }
        clean = [pod for pod in open_pods if not self._conflicts(team, pod)]
        candidates = clean or open_pods
        best = min(candidates, key=lambda pod: (distances[pod.pod_number], pod.pod_number))

        entry = self._entry(team, seed=seed, rank=rank)
        entry.distance = distances[best.pod_number]
        entry.conference_relaxed = not clean
        entry.nearest_hosts = nearest_sites(team, hosts, limit=self.nearest_host_count)
        if entry.conference_relaxed:
            logger.warning(
                "No conference-clean pod for %s (seed %d); placed in pod %d",
                team.team_id, seed, best.pod_number,
            )
        best.place(entry)

    @staticmethod
    def _conflicts(team: Team, pod: Pod) -> bool:
        return bool(team.conference) and team.conference in pod.conferences

    @staticmethod
    def _entry(team: Team, seed: int, rank: int) -> PodEntry:
        return PodEntry(
            team_id=team.team_id,
            name=team.name,
            conference=team.conference,
            seed=seed,
            rank=rank,
        )


def build_bracket_projection(
    league: str,
    season: str,
    ordered_team_ids: Sequence[str],
    teams: Mapping[str, Team],
    ranks: Mapping[str, int],
    seeded_by: str = "rpi",
    tier_count: int = TIER_COUNT,
    tier_size: int = TIER_SIZE,
) -> BracketProjection:
    """
    Args:
        ordered_team_ids: ranked teams, best first.
        ranks: team_id -> the rank the ordering came from (shown on entries).
    """
    tiers = seed_tiers(ordered_team_ids, tier_count, tier_size)
    pods = PodAssigner().assign(tiers, teams, ranks)
    return BracketProjection(league=league, season=season, seeded_by=seeded_by, tiers=tiers, pods=pods)
