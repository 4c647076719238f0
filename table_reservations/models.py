from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from .clock import format_time, parse_calendar_date, parse_time_of_day


@dataclass(frozen=True)
class ReservationRecord:
    reservation_id: int
    client_name: str
    date: date
    time: time
    people: int
    table: str
    created_at: datetime
    updated_at: datetime

    @property
    def slot_key(self) -> tuple[str, date, time]:
        return (self.table, self.date, self.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.reservation_id,
            "clientName": self.client_name,
            "date": self.date.isoformat(),
            "time": format_time(self.time),
            "people": self.people,
            "table": self.table,
            "createdAt": self.created_at.isoformat(timespec="seconds"),
            "updatedAt": self.updated_at.isoformat(timespec="seconds"),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ReservationRecord":
        reservation_date = parse_calendar_date(str(data["date"]))
        reservation_time = parse_time_of_day(str(data["time"]))
        if reservation_date is None or reservation_time is None:
            raise ValueError("date/time fields are malformed")

        reservation_id = data["id"]
        people = data["people"]
        if isinstance(reservation_id, bool) or not isinstance(reservation_id, int):
            raise ValueError("id must be an integer")
        if isinstance(people, bool) or not isinstance(people, int):
            raise ValueError("people must be an integer")

        created_at = _parse_timestamp(str(data["createdAt"]))
        updated_raw = data.get("updatedAt")
        updated_at = _parse_timestamp(str(updated_raw)) if updated_raw is not None else created_at

        return ReservationRecord(
            reservation_id=reservation_id,
            client_name=str(data["clientName"]),
            date=reservation_date,
            time=reservation_time,
            people=people,
            table=str(data["table"]),
            created_at=created_at,
            updated_at=updated_at,
        )


@dataclass(frozen=True)
class ReservationDraft:
    """Unvalidated form input. Values may be raw strings or already typed."""

    client_name: Any = None
    date: Any = None
    time: Any = None
    people: Any = None
    table: Any = None

    @staticmethod
    def from_record(record: ReservationRecord) -> "ReservationDraft":
        return ReservationDraft(
            client_name=record.client_name,
            date=record.date.isoformat(),
            time=format_time(record.time),
            people=record.people,
            table=record.table,
        )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ReservationDraft":
        return ReservationDraft(
            client_name=data.get("clientName", data.get("client_name")),
            date=data.get("date"),
            time=data.get("time"),
            people=data.get("people"),
            table=data.get("table"),
        )


def _parse_timestamp(value: str) -> datetime:
    # Browser-produced timestamps end in "Z"; records are kept as local naive time.
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
