"""Decoding of the per-area ``commands`` payload returned by the remote service.

The payload is a decoded JSON object. Only the fields the timeline needs are
kept; unknown keys are ignored. Any missing required field or wrong JSON type
fails the whole batch with :class:`PipelineError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Final, Mapping, Optional, TypeVar

from .errors import EC_INPUT_FORMAT, EC_INPUT_MISSING, EC_INPUT_TYPE, PipelineError

T = TypeVar("T")

_MISSING: Final = object()

_BATCH_LISTS: Final[dict[str, str]] = {
    "person_events": "personEvents",
    "events": "events",
    "person_drops": "personDrops",
    "person_resets": "personResets",
    "sacrament_attendance": "sacramentAttendance",
    "contacts": "contacts",
}


def _check_object(record: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise PipelineError(EC_INPUT_TYPE, f"{where}: expected an object, got {type(record).__name__}")
    return record


def _get(record: Mapping[str, Any], key: str, where: str, *, required: bool) -> Any:
    value = record.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            raise PipelineError(EC_INPUT_MISSING, f"{where}: missing required field '{key}'")
        return None
    return value


def _str(record: Mapping[str, Any], key: str, where: str, *, required: bool = False) -> Optional[str]:
    value = _get(record, key, where, required=required)
    if value is not None and not isinstance(value, str):
        raise PipelineError(EC_INPUT_TYPE, f"{where}: field '{key}' must be a string")
    return value


def _int(record: Mapping[str, Any], key: str, where: str, *, required: bool = False) -> Optional[int]:
    value = _get(record, key, where, required=required)
    if value is None:
        return None
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise PipelineError(EC_INPUT_TYPE, f"{where}: field '{key}' must be an integer")
    return value


def _timestamp(record: Mapping[str, Any], key: str, where: str, *, required: bool = False) -> Optional[int]:
    value = _int(record, key, where, required=required)
    if value is not None and value < 0:
        raise PipelineError(EC_INPUT_FORMAT, f"{where}: field '{key}' must be a non-negative timestamp")
    return value


@dataclass(frozen=True)
class Contact:
    id: str
    status: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    preferred_language_id: Optional[int] = None

    @classmethod
    def from_dict(cls, record: Any, where: str = "contact") -> "Contact":
        record = _check_object(record, where)
        return cls(
            id=_str(record, "id", where, required=True),
            status=_int(record, "status", where, required=True),
            first_name=_str(record, "first", where),
            last_name=_str(record, "last", where),
            preferred_language_id=_int(record, "preferredLanguageId", where),
        )


@dataclass(frozen=True)
class Event:
    id: str
    start_time: Optional[int] = None
    report: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Any, where: str = "event") -> "Event":
        record = _check_object(record, where)
        return cls(
            id=_str(record, "id", where, required=True),
            start_time=_timestamp(record, "startTime", where),
            report=_str(record, "lessonPlan", where),
        )


@dataclass(frozen=True)
class PersonEvent:
    person_id: str
    event_id: str
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Any, where: str = "personEvent") -> "PersonEvent":
        record = _check_object(record, where)
        return cls(
            person_id=_str(record, "personId", where, required=True),
            event_id=_str(record, "eventId", where, required=True),
            id=_str(record, "id", where),
        )


@dataclass(frozen=True)
class Drop:
    person_id: str
    drop_date: int
    created_by: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Any, where: str = "personDrop") -> "Drop":
        record = _check_object(record, where)
        return cls(
            person_id=_str(record, "personId", where, required=True),
            drop_date=_timestamp(record, "dropDate", where, required=True),
            created_by=_str(record, "created_by", where),
        )


@dataclass(frozen=True)
class Reset:
    person_id: str
    reset_date: int
    created_by: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Any, where: str = "personReset") -> "Reset":
        record = _check_object(record, where)
        return cls(
            person_id=_str(record, "personId", where, required=True),
            reset_date=_timestamp(record, "resetDate", where, required=True),
            created_by=_str(record, "created_by", where),
        )


@dataclass(frozen=True)
class SacramentAttendance:
    id: str
    date: str
    person_id: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Any, where: str = "sacramentAttendance") -> "SacramentAttendance":
        record = _check_object(record, where)
        return cls(
            id=_str(record, "id", where, required=True),
            date=_str(record, "date", where, required=True),
            person_id=_str(record, "personId", where),
        )


def _decode_list(payload: Mapping[str, Any], key: str, decode: Callable[[Any, str], T]) -> tuple[T, ...]:
    items = _get(payload, key, "commands", required=True)
    if not isinstance(items, list):
        raise PipelineError(EC_INPUT_TYPE, f"commands: field '{key}' must be a list")
    return tuple(decode(item, f"{key}[{idx}]") for idx, item in enumerate(items))


@dataclass(frozen=True)
class CommandsBatch:
    """One area's raw record batch."""

    area_name: str
    contacts: tuple[Contact, ...] = ()
    events: tuple[Event, ...] = ()
    person_events: tuple[PersonEvent, ...] = ()
    person_drops: tuple[Drop, ...] = ()
    person_resets: tuple[Reset, ...] = ()
    sacrament_attendance: tuple[SacramentAttendance, ...] = ()

    @classmethod
    def from_dict(cls, payload: Any) -> "CommandsBatch":
        """Decode a ``commands`` payload.

        Raises:
            PipelineError: the payload does not match the expected schema.
        """
        payload = _check_object(payload, "commands")
        decoders: dict[str, Callable[[Any, str], Any]] = {
            "person_events": PersonEvent.from_dict,
            "events": Event.from_dict,
            "person_drops": Drop.from_dict,
            "person_resets": Reset.from_dict,
            "sacrament_attendance": SacramentAttendance.from_dict,
            "contacts": Contact.from_dict,
        }
        lists = {
            attr: _decode_list(payload, wire_key, decoders[attr])
            for attr, wire_key in _BATCH_LISTS.items()
        }
        return cls(
            area_name=_str(payload, "prosAreaName", "commands", required=True),
            **lists,
        )


def extract_area_ids(payload: Any) -> list[int]:
    """Return the ``prosAreaId`` of every entry of a key-indicators payload."""

    payload = _check_object(payload, "keyIndicators")
    indicators = _get(payload, "areaKeyIndicators", "keyIndicators", required=True)
    if not isinstance(indicators, list):
        raise PipelineError(EC_INPUT_TYPE, "keyIndicators: field 'areaKeyIndicators' must be a list")
    area_ids = []
    for idx, item in enumerate(indicators):
        where = f"areaKeyIndicators[{idx}]"
        area_ids.append(_int(_check_object(item, where), "prosAreaId", where, required=True))
    return area_ids
