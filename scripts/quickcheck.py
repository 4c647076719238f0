from __future__ import annotations

from pathlib import Path
import traceback

from table_reservations import ReservationDraft, open_engine
from table_reservations.demo import seed_demo_data


def main() -> int:
    print("[INFO] Table Reservations Quick Check")
    print("[INFO] Generating and validating demo data...")

    engine = open_engine("data")
    generated = seed_demo_data(engine, count=20, overwrite=True)
    print(f"[OK] Demo data generated: {len(generated)} records")

    first = generated[0]
    duplicate = engine.submit(
        ReservationDraft(
            client_name="Quick Check",
            date=first.date.isoformat(),
            time=first.time.strftime("%H:%M"),
            people=2,
            table=first.table,
        )
    )
    print(f"[OK] Duplicate slot rejected: {duplicate.error.kind.value if duplicate.error else 'NOT REJECTED'}")

    stats = engine.stats()
    print(f"[OK] Reservations: {stats.total_reservations}, people: {stats.total_people}")
    print(f"[OK] Most popular table: {stats.most_popular_table}")
    print(f"[OK] Snapshot YAML: {Path('data/reservations.yaml').resolve()}")
    print(f"[OK] Event Log YAML: {Path('data/reservation_events.yaml').resolve()}")

    print("[DONE] Quick check completed successfully.")
    return 0 if duplicate.error is not None else 1


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception:
        print("[ERROR] Quick check failed.")
        traceback.print_exc()
        raise SystemExit(1)
