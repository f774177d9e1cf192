"""Roadmap loading and calendar lookups."""

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from skill_sprint.core.logging import get_logger
from skill_sprint.schemas.roadmap import Roadmap, RoadmapPhase, RoadmapWeek

logger = get_logger(__name__)


class RoadmapLoadError(RuntimeError):
    """The roadmap file is missing or malformed."""


def load_roadmap(path: Path) -> Roadmap:
    """Read and validate a roadmap JSON file.

    Raises:
        RoadmapLoadError: If the file cannot be read, parsed or validated.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return Roadmap.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("Failed to load roadmap", path=str(path), error=str(e))
        raise RoadmapLoadError(f"Failed to load roadmap from {path}") from e


class RoadmapCache:
    """Holds the parsed roadmap keyed by the file's modification time.

    ``get()`` stats the file on every call and re-parses only when the mtime
    differs from the cached one, so edits to the JSON are picked up without a
    restart.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._mtime: float | None = None
        self._roadmap: Roadmap | None = None

    def get(self) -> Roadmap:
        try:
            mtime = self.path.stat().st_mtime
        except OSError as e:
            logger.error("Roadmap file not accessible", path=str(self.path), error=str(e))
            raise RoadmapLoadError(f"Roadmap file not found: {self.path}") from e

        if self._roadmap is None or mtime != self._mtime:
            self._roadmap = load_roadmap(self.path)
            self._mtime = mtime
            logger.info(
                "Roadmap loaded",
                path=str(self.path),
                weeks=self._roadmap.total_weeks,
                tasks=self._roadmap.total_tasks,
            )
        return self._roadmap

    def invalidate(self) -> None:
        self._mtime = None
        self._roadmap = None


@dataclass(frozen=True)
class WeekLocation:
    phase: RoadmapPhase
    week: RoadmapWeek
    offset: int  # 0-based week index since the start date


def locate_week(roadmap: Roadmap, start_date: date, today: date) -> WeekLocation | None:
    """Find the week that ``today`` falls into.

    Before the start date this is the first week; after the last week it is
    None (roadmap finished).
    """
    weeks = list(roadmap.iter_weeks())
    if not weeks:
        return None
    days = (today - start_date).days
    if days < 0:
        phase, week = weeks[0]
        return WeekLocation(phase, week, 0)
    index = days // 7
    if index >= len(weeks):
        return None
    phase, week = weeks[index]
    return WeekLocation(phase, week, index)

