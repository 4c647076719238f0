import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from table_reservations.web_app import create_app

NOW = datetime(2026, 3, 10, 9, 0)


def _payload(**overrides) -> dict:
    payload = {"clientName": "Ana", "date": "2026-03-10", "time": "12:00", "people": 2, "table": "T1"}
    payload.update(overrides)
    return payload


class TestWebApp(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._temp_dir.name) / "data"
        self.app = create_app(self.data_dir, now_provider=lambda: NOW)
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def test_submit_then_list(self) -> None:
        response = self.client.post("/api/reservations", json=_payload())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["reservation"]["id"], 1)

        listing = self.client.get("/api/reservations").get_json()
        self.assertTrue(listing["ok"])
        self.assertEqual(listing["mode"]["state"], "creating")
        self.assertEqual([row["clientName"] for row in listing["reservations"]], ["Ana"])

    def test_conflict_returns_structured_error(self) -> None:
        self.client.post("/api/reservations", json=_payload())
        response = self.client.post("/api/reservations", json=_payload(clientName="Bruno"))

        self.assertEqual(response.status_code, 400)
        payload = response.get_json()
        self.assertFalse(payload["ok"])
        self.assertEqual(payload["kind"], "conflict")
        self.assertTrue(payload["message"])

    def test_non_object_json_body_is_rejected(self) -> None:
        response = self.client.post("/api/reservations", json=[1, 2])
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["ok"])

        validate = self.client.post("/api/validate", json=["time", "12:00"])
        self.assertEqual(validate.status_code, 400)

        listing = self.client.get("/api/reservations").get_json()
        self.assertEqual(listing["reservations"], [])

    def test_edit_flow(self) -> None:
        self.client.post("/api/reservations", json=_payload())

        begin = self.client.post("/api/reservations/1/edit")
        self.assertEqual(begin.status_code, 200)
        begin_payload = begin.get_json()
        self.assertEqual(begin_payload["mode"], {"state": "editing", "reservation_id": 1})
        self.assertEqual(begin_payload["seed"]["time"], "12:00")

        updated = self.client.post("/api/reservations", json=_payload(people=4))
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.get_json()["reservation"]["people"], 4)
        self.assertEqual(updated.get_json()["mode"]["state"], "creating")

        listing = self.client.get("/api/reservations").get_json()
        self.assertEqual(len(listing["reservations"]), 1)

    def test_begin_edit_unknown_returns_404(self) -> None:
        self.assertEqual(self.client.post("/api/reservations/42/edit").status_code, 404)

    def test_cancel_edit(self) -> None:
        self.client.post("/api/reservations", json=_payload())
        self.client.post("/api/reservations/1/edit")

        response = self.client.post("/api/edit/cancel")
        self.assertEqual(response.get_json()["mode"]["state"], "creating")

    def test_delete_twice(self) -> None:
        self.client.post("/api/reservations", json=_payload())

        self.assertEqual(self.client.delete("/api/reservations/1").status_code, 200)
        self.assertEqual(self.client.delete("/api/reservations/1").status_code, 404)

    def test_clear(self) -> None:
        self.client.post("/api/reservations", json=_payload())
        self.client.post("/api/reservations", json=_payload(table="T2"))

        response = self.client.post("/api/reservations/clear")
        self.assertEqual(response.get_json()["removed"], 2)

    def test_validate_field(self) -> None:
        ok = self.client.post("/api/validate", json={"field": "time", "value": "21:30"}).get_json()
        self.assertTrue(ok["valid"])

        bad = self.client.post("/api/validate", json={"field": "time", "value": "23:00"}).get_json()
        self.assertFalse(bad["valid"])
        self.assertEqual(bad["kind"], "out_of_hours")

        unknown = self.client.post("/api/validate", json={"field": "phone", "value": "1"})
        self.assertEqual(unknown.status_code, 400)

    def test_stats_and_export(self) -> None:
        self.client.post("/api/reservations", json=_payload())
        self.client.post("/api/reservations", json=_payload(table="T2", people=4))

        stats = self.client.get("/api/stats").get_json()["stats"]
        self.assertEqual(stats["total_reservations"], 2)
        self.assertEqual(stats["total_people"], 6)

        export = self.client.get("/api/export.csv")
        self.assertEqual(export.status_code, 200)
        self.assertEqual(export.mimetype, "text/csv")
        self.assertEqual(len(export.get_data(as_text=True).strip().splitlines()), 3)

    def test_tables(self) -> None:
        payload = self.client.get("/api/tables").get_json()
        self.assertIn("T1", payload["tables"])
        self.assertEqual(payload["hours"], "07:00-22:59")

    def test_data_survives_app_restart(self) -> None:
        self.client.post("/api/reservations", json=_payload())

        restarted = create_app(self.data_dir, now_provider=lambda: NOW).test_client()
        listing = restarted.get("/api/reservations").get_json()
        self.assertEqual(len(listing["reservations"]), 1)


if __name__ == "__main__":
    unittest.main()
