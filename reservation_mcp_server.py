from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from table_reservations import ReservationDraft, ReservationEngine, open_engine

DEFAULT_DATA_DIR = Path(__file__).parent / "data"


class ReservationTools:
    """MCP-facing operations bound to one engine."""

    def __init__(self, engine: ReservationEngine) -> None:
        self.engine = engine

    def list_tables(self) -> list[str]:
        """List the venue's table identifiers."""
        return list(self.engine.config.tables)

    def list_reservations(self, table: str | None = None) -> list[dict[str, Any]]:
        """Return reservations sorted by date and time, optionally filtered by table."""
        records = self.engine.list()
        return [record.to_dict() for record in records if table is None or record.table == table]

    def submit_reservation(self, client_name: str, date: str, time: str, people: int, table: str) -> dict[str, Any]:
        """Create a reservation. Dates use YYYY-MM-DD and times HH:MM."""
        self.engine.cancel_edit()
        draft = ReservationDraft(client_name=client_name, date=date, time=time, people=people, table=table)
        result = self.engine.submit(draft)
        if result.error is not None:
            return {"ok": False, **result.error.to_dict()}
        return {"ok": True, "reservation": result.reservation.to_dict()}

    def cancel_reservation(self, reservation_id: int) -> dict[str, Any]:
        """Delete a reservation by id."""
        return {"ok": self.engine.delete(reservation_id)}

    def reservation_stats(self) -> dict[str, Any]:
        """Totals per table and weekday plus the average party size."""
        return self.engine.stats().to_dict()


def build_server(engine: ReservationEngine) -> FastMCP:
    mcp = FastMCP(
        "Table Reservation MCP Server",
        instructions="Expose the venue's table reservations from the table_reservations project.",
        json_response=True,
    )
    tools = ReservationTools(engine)
    mcp.resource("reservation://tables")(tools.list_tables)
    for operation in (
        tools.list_reservations,
        tools.submit_reservation,
        tools.cancel_reservation,
        tools.reservation_stats,
    ):
        mcp.tool()(operation)
    return mcp


def main() -> None:
    data_dir = Path(os.environ.get("RESERVATIONS_DATA_DIR", DEFAULT_DATA_DIR))
    build_server(open_engine(data_dir)).run()


if __name__ == "__main__":
    main()
