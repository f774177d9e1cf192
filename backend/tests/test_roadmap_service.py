"""Tests for roadmap loading, caching and week lookup."""

import json
import os
from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from skill_sprint.core.config import DEFAULT_ROADMAP_PATH
from skill_sprint.schemas.roadmap import Roadmap, TaskKind
from skill_sprint.services.roadmap_service import (
    RoadmapCache,
    RoadmapLoadError,
    load_roadmap,
    locate_week,
)


class TestRoadmapModel:
    def test_weeks_numbered_across_phases(self, roadmap):
        assert [week.number for _, week in roadmap.iter_weeks()] == [1, 2, 3, 4]
        assert roadmap.total_weeks == 4
        assert roadmap.total_tasks == 6

    def test_unknown_kind_maps_to_other(self):
        roadmap = Roadmap.model_validate(
            {"phases": [{"title": "p", "weeks": [{"tasks": [{"id": "x", "title": "x", "kind": "reading"}]}]}]}
        )
        _, _, task = next(roadmap.iter_tasks())
        assert task.kind == TaskKind.OTHER

    def test_duplicate_task_ids_rejected(self):
        data = {
            "phases": [
                {"title": "p1", "weeks": [{"tasks": [{"id": "x", "title": "one"}]}]},
                {"title": "p2", "weeks": [{"tasks": [{"id": "x", "title": "two"}]}]},
            ]
        }
        with pytest.raises(ValidationError, match="Duplicate task id"):
            Roadmap.model_validate(data)

    def test_bundled_roadmap_is_valid(self):
        roadmap = load_roadmap(DEFAULT_ROADMAP_PATH)
        assert roadmap.total_weeks == 16
        assert roadmap.total_tasks == 48


class TestLoadRoadmap:
    def test_missing_file(self, tmp_path):
        with pytest.raises(RoadmapLoadError):
            load_roadmap(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "roadmap.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RoadmapLoadError):
            load_roadmap(path)


class TestRoadmapCache:
    def test_reuses_until_mtime_changes(self, roadmap_file):
        cache = RoadmapCache(roadmap_file)
        first = cache.get()
        assert cache.get() is first

        data = json.loads(roadmap_file.read_text(encoding="utf-8"))
        data["title"] = "Renamed"
        roadmap_file.write_text(json.dumps(data), encoding="utf-8")
        stat = roadmap_file.stat()
        os.utime(roadmap_file, (stat.st_atime, stat.st_mtime + 10))

        reloaded = cache.get()
        assert reloaded is not first
        assert reloaded.title == "Renamed"

    def test_invalidate_forces_reload(self, roadmap_file):
        cache = RoadmapCache(roadmap_file)
        first = cache.get()
        cache.invalidate()
        assert cache.get() is not first

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(RoadmapLoadError, match="not found"):
            RoadmapCache(tmp_path / "missing.json").get()


class TestLocateWeek:
    START = date(2026, 3, 2)

    def test_first_day(self, roadmap):
        location = locate_week(roadmap, self.START, self.START)
        assert location.week.number == 1
        assert location.offset == 0

    def test_third_week_other_phase(self, roadmap):
        location = locate_week(roadmap, self.START, self.START + timedelta(days=15))
        assert location.week.number == 3
        assert location.phase.title == "Build"

    def test_before_start_is_first_week(self, roadmap):
        location = locate_week(roadmap, self.START, self.START - timedelta(days=3))
        assert location.week.number == 1

    def test_after_end_is_none(self, roadmap):
        assert locate_week(roadmap, self.START, self.START + timedelta(days=28)) is None

    def test_empty_roadmap(self):
        assert locate_week(Roadmap(), self.START, self.START) is None
