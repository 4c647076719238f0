"""Field-level and whole-record validation for table reservations.

Everything here is a pure function of its arguments: the store is only read
for the conflict check, and "today" is passed in by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any

from .clock import is_before_today, is_public_holiday, parse_calendar_date, parse_time_of_day
from .config import VenueConfig

if TYPE_CHECKING:
    from .models import ReservationDraft
    from .store import ReservationStore

MIN_NAME_LENGTH = 2

FIELD_ALIASES = {
    "client_name": "client_name",
    "clientName": "client_name",
    "name": "client_name",
    "date": "date",
    "time": "time",
    "people": "people",
    "table": "table",
}


class ErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    INVALID_LENGTH = "invalid_length"
    INVALID_FORMAT = "invalid_format"
    PAST_DATE = "past_date"
    CLOSED_DAY = "closed_day"
    OUT_OF_HOURS = "out_of_hours"
    NON_POSITIVE_COUNT = "non_positive_count"
    UNKNOWN_TABLE = "unknown_table"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ValidationError:
    kind: ErrorKind
    message: str
    field: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"kind": self.kind.value, "field": self.field, "message": self.message}


@dataclass(frozen=True)
class FieldResult:
    valid: bool
    message: str = ""
    kind: ErrorKind | None = None

    @staticmethod
    def from_error(error: ValidationError | None) -> "FieldResult":
        if error is None:
            return FieldResult(valid=True)
        return FieldResult(valid=False, message=error.message, kind=error.kind)


def validate_field(name: str, raw_value: Any, config: VenueConfig, today: date) -> FieldResult:
    try:
        field_name = FIELD_ALIASES[name]
    except KeyError:
        raise ValueError(f"Unknown reservation field: {name}") from None

    if field_name == "client_name":
        error = _check_name(raw_value)
    elif field_name == "date":
        error = _check_required("date", raw_value) or _check_date(raw_value, config, today)
    elif field_name == "time":
        error = _check_required("time", raw_value) or _check_time(raw_value, config)
    elif field_name == "people":
        error = _check_people(raw_value)
    else:
        error = _check_table(raw_value, config)
    return FieldResult.from_error(error)


def validate_reservation(
    draft: ReservationDraft,
    store: ReservationStore,
    config: VenueConfig,
    today: date,
    exclude_id: int | None = None,
) -> ValidationError | None:
    """Return the first failing check for ``draft``, or None when it may be stored.

    The check order decides which single message the user sees, so it is
    fixed: required fields in form order, then the calendar, then the
    opening hours, then the table/date/time conflict.
    """
    error = (
        _check_name(draft.client_name)
        or _check_required("date", draft.date)
        or _check_required("time", draft.time)
        or _check_people(draft.people)
        or _check_table(draft.table, config)
        or _check_date(draft.date, config, today)
        or _check_time(draft.time, config)
    )
    if error is not None:
        return error

    reservation_date = parse_calendar_date(draft.date)
    reservation_time = parse_time_of_day(draft.time)
    conflict = store.find_conflict(str(draft.table).strip(), reservation_date, reservation_time, exclude_id=exclude_id)
    if conflict is not None:
        return ValidationError(ErrorKind.CONFLICT, "That table is already booked at that date and time.", "table")
    return None


def parse_people(raw_value: Any) -> int | None:
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, float):
        return int(raw_value) if raw_value.is_integer() else None
    if isinstance(raw_value, str):
        try:
            return int(raw_value.strip())
        except ValueError:
            return None
    return None


def _is_blank(raw_value: Any) -> bool:
    return raw_value is None or (isinstance(raw_value, str) and not raw_value.strip())


def _check_required(field_name: str, raw_value: Any) -> ValidationError | None:
    if _is_blank(raw_value):
        return ValidationError(ErrorKind.MISSING_FIELD, f"The {field_name} is required.", field_name)
    return None


def _check_name(raw_value: Any) -> ValidationError | None:
    if _is_blank(raw_value):
        return ValidationError(ErrorKind.MISSING_FIELD, "The client name is required.", "client_name")
    if len(str(raw_value).strip()) < MIN_NAME_LENGTH:
        return ValidationError(
            ErrorKind.INVALID_LENGTH,
            f"The client name must have at least {MIN_NAME_LENGTH} characters.",
            "client_name",
        )
    return None


def _check_people(raw_value: Any) -> ValidationError | None:
    if _is_blank(raw_value):
        return ValidationError(ErrorKind.MISSING_FIELD, "The number of people is required.", "people")
    people = parse_people(raw_value)
    if people is None:
        return ValidationError(ErrorKind.INVALID_FORMAT, "The number of people must be a whole number.", "people")
    if people <= 0:
        return ValidationError(ErrorKind.NON_POSITIVE_COUNT, "The number of people must be greater than 0.", "people")
    return None


def _check_table(raw_value: Any, config: VenueConfig) -> ValidationError | None:
    if _is_blank(raw_value):
        return ValidationError(ErrorKind.MISSING_FIELD, "A table must be selected.", "table")
    if not config.is_known_table(str(raw_value).strip()):
        return ValidationError(ErrorKind.UNKNOWN_TABLE, f"Unknown table: {raw_value}.", "table")
    return None


def _check_date(raw_value: Any, config: VenueConfig, today: date) -> ValidationError | None:
    reservation_date = parse_calendar_date(raw_value)
    if reservation_date is None:
        return ValidationError(ErrorKind.INVALID_FORMAT, "The date must use the YYYY-MM-DD format.", "date")
    if is_before_today(reservation_date, today):
        return ValidationError(ErrorKind.PAST_DATE, "The selected date has already passed.", "date")
    if config.holiday_country and is_public_holiday(reservation_date, config.holiday_country):
        return ValidationError(ErrorKind.CLOSED_DAY, "The venue is closed on public holidays.", "date")
    return None


def _check_time(raw_value: Any, config: VenueConfig) -> ValidationError | None:
    reservation_time = parse_time_of_day(raw_value)
    if reservation_time is None:
        return ValidationError(ErrorKind.INVALID_FORMAT, "The time must use the HH:MM format.", "time")
    if not config.open_hour <= reservation_time.hour <= config.close_hour:
        return ValidationError(
            ErrorKind.OUT_OF_HOURS,
            f"Reservations are accepted from {config.hours_label()}.",
            "time",
        )
    return None
