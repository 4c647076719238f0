from __future__ import annotations

import csv
from dataclasses import dataclass, field
import io
from typing import Any, Iterable

from .models import ReservationRecord

CSV_COLUMNS = ["id", "clientName", "date", "time", "people", "table", "createdAt", "updatedAt"]
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass(frozen=True)
class ReservationStats:
    total_reservations: int = 0
    total_people: int = 0
    average_party_size: float = 0.0
    most_popular_table: str | None = None
    per_table: dict[str, int] = field(default_factory=dict)
    per_weekday: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_reservations": self.total_reservations,
            "total_people": self.total_people,
            "average_party_size": self.average_party_size,
            "most_popular_table": self.most_popular_table,
            "per_table": dict(self.per_table),
            "per_weekday": dict(self.per_weekday),
        }


def reservation_stats(records: Iterable[ReservationRecord]) -> ReservationStats:
    rows = list(records)
    if not rows:
        return ReservationStats()

    per_table: dict[str, int] = {}
    per_weekday: dict[str, int] = {}
    for record in rows:
        per_table[record.table] = per_table.get(record.table, 0) + 1
        weekday = WEEKDAY_NAMES[record.date.weekday()]
        per_weekday[weekday] = per_weekday.get(weekday, 0) + 1

    total_people = sum(record.people for record in rows)
    # On ties the table reached last wins.
    most_popular = None
    for table, count in per_table.items():
        if most_popular is None or count >= per_table[most_popular]:
            most_popular = table

    return ReservationStats(
        total_reservations=len(rows),
        total_people=total_people,
        average_party_size=round(total_people / len(rows), 2),
        most_popular_table=most_popular,
        per_table=per_table,
        per_weekday={name: per_weekday[name] for name in WEEKDAY_NAMES if name in per_weekday},
    )


def export_csv(records: Iterable[ReservationRecord]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for record in records:
        writer.writerow(record.to_dict())
    return buffer.getvalue()
