from __future__ import annotations

import pytest

from areabook_stats.core.errors import EC_INPUT_FORMAT, PipelineError
from areabook_stats.core.records import CommandsBatch
from areabook_stats.core.timeline import (
    TimelineBuilder,
    TimelineEntry,
    TimelineEventKind,
    build_people,
    sacrament_date_to_ms,
    timeline_frame,
)

DAY_MS = 24 * 60 * 60 * 1000


def _by_name(people):
    return {p.name: p for p in people}


def test_members_are_not_tracked(make_payload) -> None:
    people = build_people(CommandsBatch.from_dict(make_payload()))
    assert sorted(p.name for p in people) == ["AnnLee", "Bo"]


def test_person_fields(make_payload) -> None:
    people = _by_name(build_people(CommandsBatch.from_dict(make_payload())))
    ann = people["AnnLee"]
    assert ann.language == 1
    assert ann.area == "Springfield"
    assert people["Bo"].language is None


def test_events_are_linked_and_sorted(make_payload) -> None:
    """Events arrive out of order; the timeline comes back sorted by time."""
    ann = _by_name(build_people(CommandsBatch.from_dict(make_payload())))["AnnLee"]
    assert ann.timeline == [
        TimelineEntry(1 * DAY_MS, "", TimelineEventKind.EVENT),
        TimelineEntry(3 * DAY_MS, "second visit", TimelineEventKind.EVENT),
    ]


def test_event_without_start_time_is_discarded(make_payload) -> None:
    ann = _by_name(build_people(CommandsBatch.from_dict(make_payload())))["AnnLee"]
    assert all(entry.details != "never held" for entry in ann.timeline)


def test_unresolved_references_are_dropped_silently(make_payload) -> None:
    """Links to members or unknown ids never reach a timeline and never raise."""
    people = build_people(CommandsBatch.from_dict(make_payload()))
    times = [entry.time for person in people for entry in person.timeline]
    assert 2 * DAY_MS not in times  # e4 belongs to a member
    assert 4 * DAY_MS not in times  # e5 belongs to an unknown person


def test_drops_and_resets(make_payload) -> None:
    bo = _by_name(build_people(CommandsBatch.from_dict(make_payload())))["Bo"]
    assert bo.timeline == [
        TimelineEntry(5 * DAY_MS, "Elder Smith", TimelineEventKind.DROP),
        TimelineEntry(6 * DAY_MS, "", TimelineEventKind.RESET),
    ]


def test_timelines_are_non_decreasing(make_payload) -> None:
    payload = make_payload(
        personDrops=[{"personId": "p1", "dropDate": 10 * DAY_MS}, {"personId": "p1", "dropDate": 0}],
        personResets=[{"personId": "p1", "resetDate": 2 * DAY_MS}],
    )
    for person in build_people(CommandsBatch.from_dict(payload)):
        times = [entry.time for entry in person.timeline]
        assert times == sorted(times)


def test_sacrament_is_tagged_as_reset_in_milliseconds(make_payload) -> None:
    """Attendance resolves through the event links and replays as a RESET."""
    payload = make_payload(sacramentAttendance=[
        {"id": "e2", "personId": "p1", "date": "1970-01-03"},
        {"id": "no-such-event", "personId": "p1", "date": "1970-01-05"},
    ])
    ann = _by_name(build_people(CommandsBatch.from_dict(payload)))["AnnLee"]
    assert TimelineEntry(2 * DAY_MS, "", TimelineEventKind.RESET) in ann.timeline
    assert len(ann.timeline) == 3


def test_sacrament_kind_can_be_overridden(make_payload) -> None:
    payload = make_payload(sacramentAttendance=[{"id": "e1", "date": "1970-01-03"}])
    builder = TimelineBuilder(sacrament_kind=TimelineEventKind.SACRAMENT)
    ann = _by_name(builder.build(CommandsBatch.from_dict(payload)))["AnnLee"]
    assert ann.timeline[1] == TimelineEntry(2 * DAY_MS, "", TimelineEventKind.SACRAMENT)


def test_invalid_sacrament_date_fails_batch(make_payload) -> None:
    payload = make_payload(sacramentAttendance=[{"id": "e1", "date": "03/01/1970"}])
    with pytest.raises(PipelineError) as ei:
        build_people(CommandsBatch.from_dict(payload))
    assert ei.value.code == EC_INPUT_FORMAT


def test_sacrament_date_to_ms() -> None:
    assert sacrament_date_to_ms("1970-01-01") == 0
    assert sacrament_date_to_ms("2024-03-10") == 1710028800000


def test_same_person_in_two_areas_stays_separate(make_payload) -> None:
    """Areas are the aggregation boundary: no merge across batches."""
    north = build_people(CommandsBatch.from_dict(make_payload(area="North")))
    south = build_people(CommandsBatch.from_dict(make_payload(area="South")))
    anns = [p for p in north + south if p.name == "AnnLee"]
    assert [p.area for p in anns] == ["North", "South"]
    assert anns[0] is not anns[1]
    assert anns[0].timeline is not anns[1].timeline


def test_timeline_frame(make_payload) -> None:
    df = timeline_frame(build_people(CommandsBatch.from_dict(make_payload())))
    assert list(df.columns) == ["person", "area", "language", "time", "kind", "details"]
    assert len(df) == 4
    assert set(df["kind"]) == {"event", "drop", "reset"}


def test_timeline_frame_empty() -> None:
    df = timeline_frame([])
    assert df.empty
    assert "time" in df.columns


def test_sacrament_date_before_epoch_fails_batch(make_payload) -> None:
    """Timeline times are unsigned; a 1969 date cannot be placed."""
    payload = make_payload(sacramentAttendance=[{"id": "e1", "date": "1969-12-31"}])
    with pytest.raises(PipelineError) as ei:
        build_people(CommandsBatch.from_dict(payload))
    assert ei.value.code == EC_INPUT_FORMAT
