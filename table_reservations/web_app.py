from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
from typing import Any, Callable

from flask import Flask, Response, jsonify, request

from .config import VenueConfig
from .engine import Editing, ReservationEngine, open_engine
from .models import ReservationDraft
from .store import PersistenceError


def create_app(
    data_dir: str | Path = "data",
    now_provider: Callable[[], datetime] | None = None,
    config: VenueConfig | None = None,
) -> Flask:
    app = Flask(__name__)
    engine: ReservationEngine = open_engine(data_dir, config=config, clock=now_provider)
    app.config["RESERVATION_ENGINE"] = engine

    def _serialize_mode() -> dict[str, Any]:
        mode = engine.mode
        if isinstance(mode, Editing):
            return {"state": "editing", "reservation_id": mode.reservation_id}
        return {"state": "creating", "reservation_id": None}

    @app.after_request
    def add_cors_headers(response: Any) -> Any:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(error: PersistenceError) -> Any:
        return jsonify({"ok": False, "message": f"Reservations could not be saved: {error}"}), 500

    @app.get("/api/tables")
    def get_tables() -> Any:
        return jsonify({"ok": True, "tables": list(engine.config.tables), "hours": engine.config.hours_label()})

    @app.get("/api/reservations")
    def list_reservations() -> Any:
        return jsonify(
            {
                "ok": True,
                "mode": _serialize_mode(),
                "reservations": [record.to_dict() for record in engine.list()],
            }
        )

    @app.post("/api/reservations")
    def submit_reservation() -> Any:
        payload = _json_object()
        if payload is None:
            return jsonify({"ok": False, "message": "Request body must be a JSON object."}), 400
        result = engine.submit(ReservationDraft.from_dict(payload))
        if result.error is not None:
            return jsonify({"ok": False, **result.error.to_dict(), "mode": _serialize_mode()}), 400
        return jsonify({"ok": True, "reservation": result.reservation.to_dict(), "mode": _serialize_mode()})

    @app.post("/api/reservations/<int:reservation_id>/edit")
    def begin_edit(reservation_id: int) -> Any:
        record = engine.begin_edit(reservation_id)
        if record is None:
            return jsonify({"ok": False, "message": "Reservation not found."}), 404
        seed = engine.draft_seed
        return jsonify(
            {
                "ok": True,
                "mode": _serialize_mode(),
                "seed": {
                    "clientName": seed.client_name,
                    "date": seed.date,
                    "time": seed.time,
                    "people": seed.people,
                    "table": seed.table,
                },
            }
        )

    @app.post("/api/edit/cancel")
    def cancel_edit() -> Any:
        engine.cancel_edit()
        return jsonify({"ok": True, "mode": _serialize_mode()})

    @app.delete("/api/reservations/<int:reservation_id>")
    def delete_reservation(reservation_id: int) -> Any:
        if not engine.delete(reservation_id):
            return jsonify({"ok": False, "message": "Reservation not found."}), 404
        return jsonify({"ok": True, "mode": _serialize_mode()})

    @app.post("/api/reservations/clear")
    def clear_reservations() -> Any:
        removed = engine.clear_all()
        return jsonify({"ok": True, "removed": removed})

    @app.post("/api/validate")
    def validate_field() -> Any:
        payload = _json_object()
        if payload is None:
            return jsonify({"ok": False, "message": "Request body must be a JSON object."}), 400
        field_name = str(payload.get("field", "")).strip()
        try:
            result = engine.validate_field(field_name, payload.get("value"))
        except ValueError as error:
            return jsonify({"ok": False, "message": str(error)}), 400
        return jsonify(
            {
                "ok": True,
                "field": field_name,
                "valid": result.valid,
                "message": result.message,
                "kind": result.kind.value if result.kind is not None else None,
            }
        )

    @app.get("/api/stats")
    def get_stats() -> Any:
        return jsonify({"ok": True, "stats": engine.stats().to_dict()})

    @app.get("/api/export.csv")
    def export_reservations() -> Any:
        return Response(
            engine.export_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=reservations.csv"},
        )

    return app


def _json_object() -> dict[str, Any] | None:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    return payload if isinstance(payload, dict) else None


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    app.run(host="127.0.0.1", port=5000, debug=False)
