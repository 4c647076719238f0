from __future__ import annotations

from datetime import date, timedelta
import random
from typing import TYPE_CHECKING

from .clock import is_public_holiday
from .config import VenueConfig
from .models import ReservationDraft, ReservationRecord

if TYPE_CHECKING:
    from .engine import ReservationEngine

DEMO_NAMES = ["Ana", "Bruno", "Carla", "Diego", "Elena", "Felipe", "Gabriela", "Hugo", "Irene", "Javier"]


def generate_demo_drafts(
    start_date: date,
    config: VenueConfig | None = None,
    count: int = 20,
    days: int = 14,
) -> list[ReservationDraft]:
    """Deterministic sample drafts that never collide on table, date and time."""
    if count <= 0:
        raise ValueError("count must be greater than zero")
    if days <= 0:
        raise ValueError("days must be greater than zero")

    venue = config or VenueConfig()
    open_days = [
        start_date + timedelta(days=offset)
        for offset in range(days)
        if not (venue.holiday_country and is_public_holiday(start_date + timedelta(days=offset), venue.holiday_country))
    ]
    if not open_days:
        raise ValueError("No open days available in the given window.")

    slot_count = len(open_days) * (venue.close_hour - venue.open_hour + 1) * 2 * len(venue.tables)
    if count > slot_count:
        raise ValueError("count is larger than the number of available slots")

    rng = random.Random(f"demo:{start_date.isoformat()}:{count}:{days}")
    used: set[tuple[str, date, str]] = set()
    drafts: list[ReservationDraft] = []
    while len(drafts) < count:
        day = rng.choice(open_days)
        hour = rng.randint(venue.open_hour, venue.close_hour)
        slot_time = f"{hour:02d}:{rng.choice([0, 30]):02d}"
        table = rng.choice(venue.tables)
        key = (table, day, slot_time)
        if key in used:
            continue
        used.add(key)
        drafts.append(
            ReservationDraft(
                client_name=rng.choice(DEMO_NAMES),
                date=day.isoformat(),
                time=slot_time,
                people=rng.randint(1, 8),
                table=table,
            )
        )
    return drafts


def seed_demo_data(engine: ReservationEngine, count: int = 20, overwrite: bool = True) -> list[ReservationRecord]:
    """Submit demo drafts through ``engine``; drafts it rejects are skipped."""
    if overwrite:
        engine.clear_all()

    created: list[ReservationRecord] = []
    engine.cancel_edit()
    start_date = engine.today()
    for draft in generate_demo_drafts(start_date, engine.config, count=count):
        result = engine.submit(draft)
        if result.reservation is not None:
            created.append(result.reservation)
    return created
