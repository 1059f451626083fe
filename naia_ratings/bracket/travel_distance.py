"""
Travel distance between campuses for opening-round pod assignment.

Distances are great-circle miles from the Haversine formula. A team without
coordinates is treated as infinitely far away so it sorts after every
located site instead of silently winning ties.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from ..models.team import Team

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compute great-circle distance between two points on Earth in miles.

    Args:
        lat1, lon1: Point 1 coordinates (degrees)
        lat2, lon2: Point 2 coordinates (degrees)

    Returns:
        Distance in miles
    """
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_MILES * c


def team_distance(team: Team, site: Team) -> float:
    """Miles from ``team``'s campus to ``site``'s campus (inf when unknown)."""
    if not (team.has_location and site.has_location):
        return math.inf
    return haversine_miles(team.latitude, team.longitude, site.latitude, site.longitude)


def nearest_sites(team: Team, sites: Sequence[Team], limit: int = 4) -> List[Dict]:
    """
    The ``limit`` closest sites to ``team``, nearest first.

    Each entry flags whether the site shares the team's conference.
    """
    ranked = sorted(
        ((team_distance(team, site), idx, site) for idx, site in enumerate(sites)),
        key=lambda item: (item[0], item[1]),
    )
    out: List[Dict] = []
    for distance, _, site in ranked[:limit]:
        out.append(
            {
                "team_id": site.team_id,
                "name": site.name,
                "distance": None if math.isinf(distance) else round(distance, 1),
                "has_conference_conflict": bool(team.conference) and site.conference == team.conference,
            }
        )
    return out
