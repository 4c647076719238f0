from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any, Union

from .clock import Clock, parse_calendar_date, parse_time_of_day, system_clock, today
from .config import VenueConfig
from .models import ReservationDraft, ReservationRecord
from .reports import ReservationStats, export_csv, reservation_stats
from .store import ReservationStore
from .validation import ErrorKind, FieldResult, ValidationError, parse_people, validate_field, validate_reservation
from .yaml_store import YamlSnapshotFile


@dataclass(frozen=True)
class Creating:
    pass


@dataclass(frozen=True)
class Editing:
    reservation_id: int


EditMode = Union[Creating, Editing]

SUBMIT = "submit"
BEGIN_EDIT = "begin_edit"
CANCEL = "cancel"


def next_mode(mode: EditMode, event: str, reservation_id: int | None = None) -> EditMode:
    """Pure transition function of the create/edit form flow."""
    if event == BEGIN_EDIT:
        if reservation_id is None:
            raise ValueError("begin_edit requires a reservation_id")
        return Editing(reservation_id)
    if event in (SUBMIT, CANCEL):
        return Creating()
    raise ValueError(f"Unknown event: {event}")


@dataclass(frozen=True)
class SubmitResult:
    reservation: ReservationRecord | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReservationEngine:
    def __init__(
        self,
        store: ReservationStore,
        config: VenueConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.store = store
        self.config = config or VenueConfig()
        self._clock: Clock = clock or system_clock
        self._mode: EditMode = Creating()

    @property
    def mode(self) -> EditMode:
        return self._mode

    @property
    def draft_seed(self) -> ReservationDraft | None:
        if not isinstance(self._mode, Editing):
            return None
        record = self.store.get(self._mode.reservation_id)
        return ReservationDraft.from_record(record) if record is not None else None

    def submit(self, draft: ReservationDraft) -> SubmitResult:
        mode = self._mode
        now = self._clock()

        if isinstance(mode, Editing):
            current = self.store.get(mode.reservation_id)
            if current is None:
                return SubmitResult(
                    error=ValidationError(ErrorKind.NOT_FOUND, "The reservation being edited no longer exists.")
                )
            error = validate_reservation(draft, self.store, self.config, now.date(), exclude_id=current.reservation_id)
            if error is not None:
                return SubmitResult(error=error)

            record = replace(current, **_normalized_fields(draft), updated_at=now)
            self.store.replace(record)
        else:
            error = validate_reservation(draft, self.store, self.config, now.date())
            if error is not None:
                return SubmitResult(error=error)

            record = ReservationRecord(
                reservation_id=self.store.allocate_id(),
                created_at=now,
                updated_at=now,
                **_normalized_fields(draft),
            )
            self.store.add(record)

        self._mode = next_mode(mode, SUBMIT)
        return SubmitResult(reservation=record)

    def begin_edit(self, reservation_id: int) -> ReservationRecord | None:
        record = self.store.get(reservation_id)
        if record is None:
            return None
        self._mode = next_mode(self._mode, BEGIN_EDIT, reservation_id)
        return record

    def cancel_edit(self) -> None:
        self._mode = next_mode(self._mode, CANCEL)

    def delete(self, reservation_id: int) -> bool:
        removed = self.store.remove(reservation_id)
        if removed is None:
            return False
        if isinstance(self._mode, Editing) and self._mode.reservation_id == reservation_id:
            self._mode = next_mode(self._mode, CANCEL)
        return True

    def clear_all(self) -> int:
        removed = self.store.clear()
        self._mode = next_mode(self._mode, CANCEL)
        return removed

    def list(self) -> list[ReservationRecord]:
        return self.store.list()

    def today(self) -> date:
        return today(self._clock)

    def validate_field(self, name: str, value: Any) -> FieldResult:
        return validate_field(name, value, self.config, self.today())

    def stats(self) -> ReservationStats:
        return reservation_stats(self.store.list())

    def export_csv(self) -> str:
        return export_csv(self.store.list())


def _normalized_fields(draft: ReservationDraft) -> dict[str, Any]:
    # Only called after validate_reservation accepted the draft.
    return {
        "client_name": str(draft.client_name).strip(),
        "date": parse_calendar_date(draft.date),
        "time": parse_time_of_day(draft.time),
        "people": parse_people(draft.people),
        "table": str(draft.table).strip(),
    }


def open_engine(
    data_dir: str | Path = "data",
    config: VenueConfig | None = None,
    clock: Clock | None = None,
) -> ReservationEngine:
    """Build an engine over the YAML snapshot in ``data_dir`` and load it."""
    store = ReservationStore(YamlSnapshotFile(data_dir))
    store.load()
    return ReservationEngine(store, config=config, clock=clock)
