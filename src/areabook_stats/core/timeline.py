"""Per-person timeline reconstruction from one area's record batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from operator import attrgetter
from typing import Iterable, Optional

import pandas as pd

from .errors import EC_INPUT_FORMAT, PipelineError
from .records import CommandsBatch

logger = logging.getLogger(__name__)

MEMBER_STATUS = 40

TIMELINE_COLUMNS = ("person", "area", "language", "time", "kind", "details")


class TimelineEventKind(Enum):
    EVENT = "event"
    DROP = "drop"
    RESET = "reset"
    SACRAMENT = "sacrament"


@dataclass(frozen=True)
class TimelineEntry:
    """A single dated entry on a person's timeline.

    Attributes:
        time: Unix timestamp in milliseconds.
        details: Free text (lesson report or the actor of a drop/reset).
        kind: What happened at ``time``.
    """

    time: int
    details: str
    kind: TimelineEventKind


@dataclass
class Person:
    name: str
    area: str
    language: Optional[int] = None
    timeline: list[TimelineEntry] = field(default_factory=list)


def sacrament_date_to_ms(value: str) -> int:
    """Convert a ``YYYY-MM-DD`` attendance date to UTC-midnight unix milliseconds.

    Raises:
        PipelineError: the date does not follow ``YYYY-MM-DD`` or is before
            the unix epoch.
    """
    try:
        day = datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise PipelineError(EC_INPUT_FORMAT, f"invalid sacrament date {value!r}: {exc}") from exc
    time = int(day.timestamp()) * 1000
    if time < 0:
        raise PipelineError(EC_INPUT_FORMAT, f"sacrament date {value!r} is before 1970-01-01")
    return time


class TimelineBuilder:
    """Turn a :class:`CommandsBatch` into a list of :class:`Person` timelines.

    Sacrament attendance is placed on the timeline as a ``RESET`` entry, which
    is how the upstream tool replays it. Pass ``sacrament_kind`` to tag it
    differently.
    """

    def __init__(self, sacrament_kind: TimelineEventKind = TimelineEventKind.RESET):
        self.sacrament_kind = sacrament_kind

    def build(self, batch: CommandsBatch) -> list[Person]:
        people: dict[str, Person] = {}
        for contact in batch.contacts:
            if contact.status == MEMBER_STATUS:
                continue
            people[contact.id] = Person(
                name=f"{contact.first_name or ''}{contact.last_name or ''}",
                language=contact.preferred_language_id,
                area=batch.area_name,
            )

        event_people = {link.event_id: link.person_id for link in batch.person_events}

        def lookup_by_event(event_id: str) -> Optional[Person]:
            person_id = event_people.get(event_id)
            return None if person_id is None else people.get(person_id)

        dropped = 0

        for event in batch.events:
            if event.start_time is None:
                continue
            person = lookup_by_event(event.id)
            if person is None:
                dropped += 1
                continue
            person.timeline.append(
                TimelineEntry(event.start_time, event.report or "", TimelineEventKind.EVENT)
            )

        for drop in batch.person_drops:
            person = people.get(drop.person_id)
            if person is None:
                dropped += 1
                continue
            person.timeline.append(
                TimelineEntry(drop.drop_date, drop.created_by or "", TimelineEventKind.DROP)
            )

        for reset in batch.person_resets:
            person = people.get(reset.person_id)
            if person is None:
                dropped += 1
                continue
            person.timeline.append(
                TimelineEntry(reset.reset_date, reset.created_by or "", TimelineEventKind.RESET)
            )

        for attendance in batch.sacrament_attendance:
            time = sacrament_date_to_ms(attendance.date)
            person = lookup_by_event(attendance.id)
            if person is None:
                dropped += 1
                continue
            person.timeline.append(TimelineEntry(time, "", self.sacrament_kind))

        for person in people.values():
            person.timeline.sort(key=attrgetter("time"))

        logger.debug(
            "area %s: %d people, %d unresolved records skipped",
            batch.area_name,
            len(people),
            dropped,
        )
        return list(people.values())


def build_people(batch: CommandsBatch) -> list[Person]:
    """Build people with the default :class:`TimelineBuilder`."""
    return TimelineBuilder().build(batch)


def timeline_frame(people: Iterable[Person]) -> pd.DataFrame:
    """Flatten timelines into one row per entry."""

    rows = [
        {
            "person": person.name,
            "area": person.area,
            "language": person.language,
            "time": entry.time,
            "kind": entry.kind.value,
            "details": entry.details,
        }
        for person in people
        for entry in person.timeline
    ]
    return pd.DataFrame(rows, columns=list(TIMELINE_COLUMNS))
