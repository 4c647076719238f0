from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
import logging
from typing import Any, Iterator, Protocol

from .models import ReservationRecord

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    pass


class ReservationIntegrityError(RuntimeError):
    pass


@dataclass
class Snapshot:
    rows: list[dict[str, Any]] = field(default_factory=list)
    next_id: int | None = None


class SnapshotBackend(Protocol):
    def read_snapshot(self) -> Snapshot: ...

    def write_snapshot(self, snapshot: Snapshot) -> None: ...

    def record_event(self, event_type: str, payload: dict[str, Any]) -> None: ...


class ReservationStore:
    """Ordered in-memory reservations, written through to a backend on every change."""

    def __init__(self, backend: SnapshotBackend) -> None:
        self._backend = backend
        self._records: list[ReservationRecord] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ReservationRecord]:
        return iter(list(self._records))

    def load(self) -> list[ReservationRecord]:
        snapshot = self._backend.read_snapshot()
        records: list[ReservationRecord] = []
        seen_ids: set[int] = set()
        seen_slots: set[tuple[str, date, time]] = set()

        for index, row in enumerate(snapshot.rows):
            try:
                record = ReservationRecord.from_dict(row)
            except (KeyError, TypeError, ValueError) as error:
                logger.warning("Skipping malformed reservation row %d: %s", index, error)
                continue
            if record.reservation_id in seen_ids:
                logger.warning("Skipping reservation row %d: duplicate id %d", index, record.reservation_id)
                continue
            if record.slot_key in seen_slots:
                logger.warning("Skipping reservation row %d: table %s already booked at that slot", index, record.table)
                continue
            seen_ids.add(record.reservation_id)
            seen_slots.add(record.slot_key)
            records.append(record)

        self._records = records
        highest_id = max(seen_ids, default=0)
        self._next_id = max(snapshot.next_id or 1, highest_id + 1)
        return list(records)

    def save(self) -> None:
        self._backend.write_snapshot(
            Snapshot(rows=[record.to_dict() for record in self._records], next_id=self._next_id)
        )

    def list(self) -> list[ReservationRecord]:
        return sorted(self._records, key=lambda record: (record.date, record.time))

    def get(self, reservation_id: int) -> ReservationRecord | None:
        for record in self._records:
            if record.reservation_id == reservation_id:
                return record
        return None

    def find_conflict(
        self,
        table: str,
        reservation_date: date,
        reservation_time: time,
        exclude_id: int | None = None,
    ) -> ReservationRecord | None:
        for record in self._records:
            if record.reservation_id == exclude_id:
                continue
            if record.slot_key == (table, reservation_date, reservation_time):
                return record
        return None

    def allocate_id(self) -> int:
        reservation_id = self._next_id
        self._next_id += 1
        return reservation_id

    def add(self, record: ReservationRecord) -> None:
        if self.get(record.reservation_id) is not None:
            raise ReservationIntegrityError(f"reservation id {record.reservation_id} is already in use")

        previous = list(self._records)
        self._records.append(record)
        self._commit(previous)
        self._backend.record_event("RESERVATION_CREATED", _event_payload(record))

    def replace(self, record: ReservationRecord) -> None:
        for index, current in enumerate(self._records):
            if current.reservation_id == record.reservation_id:
                break
        else:
            raise KeyError(record.reservation_id)

        previous = list(self._records)
        self._records[index] = record
        self._commit(previous)
        self._backend.record_event("RESERVATION_UPDATED", _event_payload(record))

    def remove(self, reservation_id: int) -> ReservationRecord | None:
        record = self.get(reservation_id)
        if record is None:
            return None

        previous = list(self._records)
        self._records = [row for row in self._records if row.reservation_id != reservation_id]
        self._commit(previous)
        self._backend.record_event("RESERVATION_DELETED", _event_payload(record))
        return record

    def clear(self) -> int:
        previous = list(self._records)
        self._records = []
        self._commit(previous)
        self._backend.record_event("RESERVATIONS_CLEARED", {"count": len(previous)})
        return len(previous)

    def _commit(self, previous: list[ReservationRecord]) -> None:
        try:
            self.save()
        except PersistenceError:
            self._records = previous
            raise


def _event_payload(record: ReservationRecord) -> dict[str, Any]:
    return {
        "reservation_id": record.reservation_id,
        "table": record.table,
        "date": record.date.isoformat(),
        "time": record.time.strftime("%H:%M"),
        "people": record.people,
    }
