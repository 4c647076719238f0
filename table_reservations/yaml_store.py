from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
import shutil
from typing import Any

import yaml

from .store import PersistenceError, Snapshot

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
SNAPSHOT_KEY = "restaurantReservations"


class YamlSnapshotFile:
    """Keeps the reservation snapshot and its event log as YAML files in ``base_dir``."""

    def __init__(self, base_dir: str | Path = "data") -> None:
        self.base_dir = Path(base_dir)
        self.snapshot_file = self.base_dir / "reservations.yaml"
        self.log_file = self.base_dir / "reservation_events.yaml"
        self._ensure_files()

    def _ensure_files(self) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            if not self.snapshot_file.exists():
                self._write_yaml(self.snapshot_file, _empty_payload())
            if not self.log_file.exists():
                self._write_yaml(self.log_file, [])
        except OSError as error:
            raise PersistenceError(f"Failed to prepare data directory: {self.base_dir}") from error

    def read_snapshot(self) -> Snapshot:
        try:
            payload = yaml.safe_load(self.snapshot_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return Snapshot()
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
            self._recover_corrupted_snapshot(error)
            return Snapshot()

        if payload is None:
            return Snapshot()
        # Unversioned snapshots are a bare list of records.
        if isinstance(payload, list):
            return Snapshot(rows=self._sanitize_rows(payload))
        if not isinstance(payload, dict):
            self._recover_corrupted_snapshot(ValueError("top-level YAML is neither a mapping nor a list"))
            return Snapshot()
        if payload.get("schema_version") != SCHEMA_VERSION:
            self._recover_corrupted_snapshot(ValueError(f"unsupported schema_version: {payload.get('schema_version')!r}"))
            return Snapshot()

        rows = payload.get(SNAPSHOT_KEY) or []
        if not isinstance(rows, list):
            self._recover_corrupted_snapshot(ValueError(f"{SNAPSHOT_KEY} is not a list"))
            return Snapshot()

        next_id = payload.get("next_id")
        if isinstance(next_id, bool) or not isinstance(next_id, int):
            next_id = None
        return Snapshot(rows=self._sanitize_rows(rows), next_id=next_id)

    def write_snapshot(self, snapshot: Snapshot) -> None:
        payload = {
            "schema_version": SCHEMA_VERSION,
            "next_id": snapshot.next_id,
            SNAPSHOT_KEY: snapshot.rows,
        }
        try:
            self._write_yaml(self.snapshot_file, payload)
        except OSError as error:
            raise PersistenceError(f"Failed to write YAML file: {self.snapshot_file}") from error

    def record_event(self, event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> None:
        timestamp = (event_time or datetime.now()).isoformat(timespec="seconds")
        try:
            events = yaml.safe_load(self.log_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            events = None
        if not isinstance(events, list):
            events = []

        events.append({"event_time": timestamp, "event_type": event_type, "payload": payload})
        try:
            self._write_yaml(self.log_file, events)
        except OSError as error:
            # The snapshot is already committed at this point.
            logger.warning("Could not append %s to event log %s: %s", event_type, self.log_file, error)

    def read_events(self) -> list[dict[str, Any]]:
        try:
            events = yaml.safe_load(self.log_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            return []
        return events if isinstance(events, list) else []

    def _sanitize_rows(self, rows: list[Any]) -> list[dict[str, Any]]:
        sanitized: list[dict[str, Any]] = []
        for index, row in enumerate(rows):
            if isinstance(row, dict):
                sanitized.append(row)
            else:
                logger.warning("Skipping snapshot row %d in %s: row is not a mapping", index, self.snapshot_file.name)
        return sanitized

    def _write_yaml(self, path: Path, payload: Any) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(payload, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(path)
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def _recover_corrupted_snapshot(self, error: Exception) -> None:
        path = self.snapshot_file
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup_path = path.with_name(f"{path.stem}.corrupt.{timestamp}{path.suffix}")
        try:
            if path.exists():
                shutil.copy2(path, backup_path)
        except OSError as copy_error:
            logger.warning("Could not back up corrupt snapshot %s: %s", path, copy_error)

        logger.warning("Reservation snapshot %s is unreadable (%s); starting with an empty store", path, error)
        try:
            self._write_yaml(path, _empty_payload())
        except OSError as write_error:
            logger.warning("Could not reset corrupt snapshot %s: %s", path, write_error)

        self.record_event(
            "SNAPSHOT_RECOVERED",
            {
                "file": str(path.name),
                "backup": str(backup_path.name),
                "reason": str(error),
            },
        )


def _empty_payload() -> dict[str, Any]:
    return {"schema_version": SCHEMA_VERSION, "next_id": 1, SNAPSHOT_KEY: []}
