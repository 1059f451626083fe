"""Ratings Store: atomic JSON/CSV persistence keyed by league and season."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Tuple

if TYPE_CHECKING:
    from ..pipeline.ratings_run import RatingsRun

logger = logging.getLogger(__name__)


class RatingsStore:
    """
    Writes one JSON document and one CSV table per (league, season).

    Both files are written to temporaries in the target directory and only
    renamed into place once both are complete. Each rename is atomic, so
    neither file is ever seen half-written, and a failure while writing
    leaves both previous files untouched. The pair is not swapped as one
    unit: a reader between the two renames can see the new JSON beside the
    previous CSV.
    """

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)

    def paths(self, league: str, season: str) -> Tuple[Path, Path]:
        stem = f"ratings_{league}_{season}"
        return self.output_dir / f"{stem}.json", self.output_dir / f"{stem}.csv"

    def commit(self, run: "RatingsRun") -> Tuple[Path, Path]:
        json_path, csv_path = self.paths(run.config.league, run.config.season)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        payload = run.to_dict()
        frame = run.to_frame()

        temps: List[str] = []
        try:
            fd, tmp_json = tempfile.mkstemp(dir=self.output_dir, prefix=".ratings_", suffix=".json.tmp")
            temps.append(tmp_json)
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)

            fd, tmp_csv = tempfile.mkstemp(dir=self.output_dir, prefix=".ratings_", suffix=".csv.tmp")
            temps.append(tmp_csv)
            os.close(fd)
            frame.to_csv(tmp_csv, index=False)

            os.replace(tmp_json, json_path)
            os.replace(tmp_csv, csv_path)
        except Exception:
            for tmp in temps:
                if os.path.exists(tmp):
                    os.remove(tmp)
            raise

        logger.info("Committed %s and %s", json_path, csv_path)
        return json_path, csv_path

    def load(self, league: str, season: str) -> Dict:
        json_path, _ = self.paths(league, season)
        with open(json_path, "r") as f:
            return json.load(f)
