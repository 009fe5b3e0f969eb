"""
Tests for emergency mode on the server
"""

from datetime import date

from stayadmin.utils.dates import month_token


def current_month_day(day):
    today = date.today()
    return date(today.year, today.month, day).isoformat()


class TestEmergencyMode:

    def seed(self, client, auth_headers, room):
        return client.post("/api/availability/bulk", json={"items": [
            {"room_id": room.id, "date": current_month_day(1), "available": True, "price_override": 110},
            {"room_id": room.id, "date": current_month_day(2), "available": False},
        ]}, headers=auth_headers)

    def month_rows(self, client, auth_headers):
        return client.get(
            "/api/availability", params={"month": month_token(date.today())}, headers=auth_headers
        ).json()

    def test_status_is_public_and_starts_inactive(self, client):
        response = client.get("/api/emergency")
        assert response.status_code == 200
        assert response.json()["active"] is False

    def test_activate_requires_auth(self, client):
        assert client.post("/api/emergency/activate").status_code == 401

    def test_activate_closes_month_and_returns_snapshot(self, client, auth_headers, room):
        self.seed(client, auth_headers, room)

        response = client.post("/api/emergency/activate", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["active"] is True
        assert body["activated_by"] == "frontdesk"
        assert len(body["snapshot"]) == 2

        rows = self.month_rows(client, auth_headers)
        assert all(r["available"] is False for r in rows)
        assert all(r["blocked_reason"] == "emergency" for r in rows)
        assert client.get("/api/emergency").json()["active"] is True

    def test_activate_is_idempotent(self, client, auth_headers, room):
        self.seed(client, auth_headers, room)

        first = client.post("/api/emergency/activate", headers=auth_headers).json()
        second = client.post("/api/emergency/activate", headers=auth_headers).json()

        assert second["snapshot"] == first["snapshot"]

    def test_deactivate_replays_snapshot(self, client, auth_headers, room):
        self.seed(client, auth_headers, room)
        before = self.month_rows(client, auth_headers)

        snapshot = client.post("/api/emergency/activate", headers=auth_headers).json()["snapshot"]
        response = client.post("/api/emergency/deactivate", json={"snapshot": snapshot}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["active"] is False

        after = self.month_rows(client, auth_headers)
        strip = lambda rows: [(r["date"], r["available"], r["price_override"], r["blocked_reason"]) for r in rows]
        assert strip(after) == strip(before)

    def test_deactivate_without_body_uses_stored_snapshot(self, client, auth_headers, room):
        self.seed(client, auth_headers, room)
        client.post("/api/emergency/activate", headers=auth_headers)

        client.post("/api/emergency/deactivate", headers=auth_headers)

        rows = self.month_rows(client, auth_headers)
        assert [r["available"] for r in rows] == [True, False]
        assert rows[1]["blocked_reason"] == "manual_block"

    def test_deactivate_when_inactive_is_noop(self, client, auth_headers):
        response = client.post("/api/emergency/deactivate", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["active"] is False
