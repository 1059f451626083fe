"""Conference-level rollups of team ratings."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping

import numpy as np
import pandas as pd

from ..models.game import GameRecord
from ..models.ratings import AdjustedRating, ConferenceRollup, RPIComponents
from ..models.team import Team

logger = logging.getLogger(__name__)

# Conference to selection area (NAIA Selection Committee policy)
CONFERENCE_AREAS: Dict[str, str] = {
    # East
    "Appalachian Athletic Conference": "East",
    "Mid-South Conference": "East",
    "Southern States Athletic Conference": "East",
    "The Sun Conference": "East",
    # Midwest
    "American Midwest Conference": "Midwest",
    "Great Plains Athletic Conference": "Midwest",
    "Heart of America Athletic Conference": "Midwest",
    "Kansas Collegiate Athletic Conference": "Midwest",
    # North
    "Chicagoland Collegiate Athletic Conference": "North",
    "Crossroads League": "North",
    "River States Conference": "North",
    "Wolverine-Hoosier Athletic Conference": "North",
    # South
    "Continental Athletic Conference": "South",
    "HBCU Athletic Conference": "South",
    "Red River Athletic Conference": "South",
    "Sooner Athletic Conference": "South",
    # West
    "California Pacific Conference": "West",
    "Cascade Collegiate Conference": "West",
    "Frontier Conference": "West",
    "Great Southwest Athletic Conference": "West",
}


def _top_half_mean(adj_net: pd.Series) -> float:
    top_n = math.ceil(len(adj_net) / 2)
    return float(adj_net.sort_values(ascending=False).head(top_n).mean())


def conference_rollups(
    teams: Mapping[str, Team],
    team_ids: List[str],
    rpi: Mapping[str, RPIComponents],
    adjusted: Mapping[str, AdjustedRating],
    schedules: Mapping[str, List[GameRecord]],
) -> List[ConferenceRollup]:
    """
    Roll ranked teams up by conference, ordered by average adjusted net
    rating (best first; ties by conference name).

    Teams without a conference label are left out.
    """
    rows = []
    for t in team_ids:
        conference = teams[t].conference
        if not conference or t not in adjusted:
            continue
        non_conf = [g for g in schedules.get(t, []) if not g.is_conference]
        rows.append(
            {
                "team_id": t,
                "conference": conference,
                "adj_net": adjusted[t].adj_net,
                "adj_ortg": adjusted[t].adj_ortg,
                "adj_drtg": adjusted[t].adj_drtg,
                "rpi": rpi[t].rpi,
                "sos": rpi[t].sos,
                "rpi_rank": rpi[t].rank,
                "nc_wins": sum(1 for g in non_conf if g.is_win),
                "nc_losses": sum(1 for g in non_conf if not g.is_win),
            }
        )
    if not rows:
        return []

    df = pd.DataFrame(rows)
    grouped = df.groupby("conference")
    summary = grouped.agg(
        team_count=("team_id", "count"),
        avg_adj_net=("adj_net", "mean"),
        avg_rpi=("rpi", "mean"),
        avg_adj_ortg=("adj_ortg", "mean"),
        avg_adj_drtg=("adj_drtg", "mean"),
        avg_sos=("sos", "mean"),
        non_conf_wins=("nc_wins", "sum"),
        non_conf_losses=("nc_losses", "sum"),
        best_rpi_rank=("rpi_rank", "min"),
        worst_rpi_rank=("rpi_rank", "max"),
    )
    summary["top_half_adj_net"] = grouped["adj_net"].apply(_top_half_mean)
    nc_total = summary["non_conf_wins"] + summary["non_conf_losses"]
    summary["non_conf_win_pct"] = (summary["non_conf_wins"] / nc_total.replace(0, np.nan)).fillna(0.0)

    summary = summary.reset_index().sort_values(
        ["avg_adj_net", "conference"], ascending=[False, True]
    )

    rollups: List[ConferenceRollup] = []
    for idx, row in enumerate(summary.itertuples(index=False), start=1):
        rollups.append(
            ConferenceRollup(
                conference=row.conference,
                area=CONFERENCE_AREAS.get(row.conference, "Unknown"),
                team_count=int(row.team_count),
                avg_adj_net=float(row.avg_adj_net),
                avg_rpi=float(row.avg_rpi),
                avg_adj_ortg=float(row.avg_adj_ortg),
                avg_adj_drtg=float(row.avg_adj_drtg),
                avg_sos=float(row.avg_sos),
                non_conf_wins=int(row.non_conf_wins),
                non_conf_losses=int(row.non_conf_losses),
                non_conf_win_pct=float(row.non_conf_win_pct),
                top_half_adj_net=float(row.top_half_adj_net),
                best_rpi_rank=int(row.best_rpi_rank) if pd.notna(row.best_rpi_rank) else None,
                worst_rpi_rank=int(row.worst_rpi_rank) if pd.notna(row.worst_rpi_rank) else None,
                adj_net_rank=idx,
            )
        )
    logger.info("Rolled up %d conferences", len(rollups))
    return rollups
