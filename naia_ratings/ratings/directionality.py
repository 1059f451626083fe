"""
Single source of truth for metric orientation.

Every consumer that needs to know whether a bigger number is good (sort
order, Power Index inversion, percentile flips) asks ``directionality``
instead of keeping its own list.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional

import numpy as np
from scipy import stats as scipy_stats


class Direction(str, Enum):
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"


_LOWER_IS_BETTER = frozenset(
    {
        "drtg",
        "adj_drtg",
        "points_against",
        "turnover_pct",
        "opp_effective_fg_pct",
        "opp_free_throw_rate",
        "dsos",
        "rank",
        "pcr",
        "pcr_avg",
        "projected_rank",
    }
)

_HIGHER_IS_BETTER = frozenset(
    {
        "ortg",
        "adj_ortg",
        "net_rating",
        "adj_net",
        "points_for",
        "win_pct",
        "opponents_win_pct",
        "opponents_opponents_win_pct",
        "rpi",
        "sos",
        "osos",
        "nsos",
        "effective_fg_pct",
        "offensive_reb_pct",
        "defensive_reb_pct",
        "free_throw_rate",
        "opp_turnover_pct",
        "fg_pct",
        "three_pt_pct",
        "ft_pct",
        "three_pt_rate",
        "pace",
        "qwp",
        "qwi",
        "power_index",
    }
)

# Pivot used to turn a lower-is-better efficiency into a higher-is-better score.
EFFICIENCY_PIVOT = 200.0


def directionality(metric: str) -> Direction:
    """Return whether higher or lower values of ``metric`` are better."""
    if metric in _LOWER_IS_BETTER:
        return Direction.LOWER_IS_BETTER
    if metric in _HIGHER_IS_BETTER:
        return Direction.HIGHER_IS_BETTER
    raise KeyError(f"Unknown metric: {metric}")


def oriented(metric: str, value: float, pivot: float = EFFICIENCY_PIVOT) -> float:
    """Map ``value`` onto a higher-is-better scale."""
    if directionality(metric) is Direction.LOWER_IS_BETTER:
        return pivot - value
    return value


def sort_descending(metric: str) -> bool:
    """Whether a best-first sort on ``metric`` is descending."""
    return directionality(metric) is Direction.HIGHER_IS_BETTER


def percentile_rank(value: Optional[float], population: Iterable[Optional[float]], metric: str) -> Optional[int]:
    """
    Share (0-100) of the population that ``value`` is strictly better than.

    Missing values are ignored; returns None when there is nothing to compare.
    """
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    values = np.array([v for v in population if v is not None], dtype=float)
    values = values[~np.isnan(values)]
    if values.size == 0:
        return None

    if directionality(metric) is Direction.HIGHER_IS_BETTER:
        pct = scipy_stats.percentileofscore(values, value, kind="strict")
    else:
        pct = 100.0 - scipy_stats.percentileofscore(values, value, kind="weak")
    return int(round(pct))


def percentile_table(rows: List[Dict], metrics: Iterable[str], key: str = "team_id") -> Dict[str, Dict[str, Optional[int]]]:
    """Percentile rank of every row for each metric, keyed by ``row[key]``."""
    metrics = list(metrics)
    columns = {m: [row.get(m) for row in rows] for m in metrics}
    return {
        row[key]: {m: percentile_rank(row.get(m), columns[m], m) for m in metrics}
        for row in rows
    }
