# tests/conftest.py
import os
import sys

import pytest

# make src/ importable without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from areabook_stats.core.timeline import Person, TimelineEntry  # noqa: E402

DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture(autouse=True)
def patch_output_dirs(monkeypatch, tmp_path):
    """Send every artefact and log of a test to its own temporary directory."""
    monkeypatch.setenv("AREABOOK_RESULT_ROOT", str(tmp_path / "results"))
    monkeypatch.setenv("AREABOOK_META_ROOT", str(tmp_path / "meta"))


@pytest.fixture
def make_payload():
    """Factory for a small but complete ``commands`` payload of one area."""

    def _make(area: str = "Springfield", **overrides) -> dict:
        payload = {
            "prosAreaName": area,
            "contacts": [
                {"id": "p1", "householdId": "h1", "status": 10, "first": "Ann", "last": "Lee",
                 "preferredLanguageId": 1},
                {"id": "p2", "householdId": "h2", "status": 20, "first": "Bo", "last": None},
                {"id": "m1", "householdId": "h3", "status": 40, "first": "Mem", "last": "Ber"},
            ],
            "events": [
                {"id": "e2", "startTime": 3 * DAY_MS, "lessonPlan": "second visit", "eventType": 1},
                {"id": "e1", "startTime": 1 * DAY_MS, "lessonPlan": None, "eventType": 1},
                {"id": "e3", "startTime": None, "lessonPlan": "never held"},
                {"id": "e4", "startTime": 2 * DAY_MS},
                {"id": "e5", "startTime": 4 * DAY_MS},
            ],
            "personEvents": [
                {"id": "pe1", "personId": "p1", "eventId": "e1"},
                {"id": "pe2", "personId": "p1", "eventId": "e2"},
                {"id": "pe3", "personId": "p1", "eventId": "e3"},
                {"id": "pe4", "personId": "m1", "eventId": "e4"},
                {"id": "pe5", "personId": "ghost", "eventId": "e5"},
            ],
            "personDrops": [
                {"id": "d1", "personId": "p2", "dropDate": 5 * DAY_MS, "created_by": "Elder Smith",
                 "status": 1},
                {"id": "d2", "personId": "ghost", "dropDate": 5 * DAY_MS, "status": 1},
            ],
            "personResets": [
                {"id": "r1", "personId": "p2", "resetDate": 6 * DAY_MS},
            ],
            "sacramentAttendance": [],
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def make_person():
    """Factory building a Person from ``(time, kind)`` pairs."""

    def _make(area: str, *entries: tuple, name: str = "someone") -> Person:
        timeline = [TimelineEntry(time, "", kind) for time, kind in entries]
        return Person(name=name, area=area, timeline=timeline)

    return _make
