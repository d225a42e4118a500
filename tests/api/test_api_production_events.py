"""
API Tests - Production Events
"""
from datetime import date

import pytest


class TestCreateProductionEvent:
    """POST /production-events"""

    async def test_created_with_location(self, client, tipping_payload):
        response = await client.post("production-events", json=tipping_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["bins_tipped"] == 10
        assert body["time"] == "09:00:00"
        assert response.headers["Location"].endswith(f"/api/v1/production-events/{body['id']}")

    async def test_same_key_reuses_report(self, client, tipping_payload):
        """Naive local time and the equivalent UTC instant land on one report"""
        first = await client.post("production-events", json=tipping_payload(date="2024-03-10T11:00:00"))
        second = await client.post("production-events", json=tipping_payload(date="2024-03-09T22:00:00Z"))

        assert first.json()["shift_report_id"] == second.json()["shift_report_id"]
        reports = (await client.get("shift-aggregates")).json()
        assert len(reports) == 1
        assert reports[0]["date"] == "2024-03-10"
        assert len(reports[0]["bin_tippings"]) == 2

    async def test_different_manager_gets_own_report(self, client, tipping_payload):
        a = await client.post("production-events", json=tipping_payload(line_manager="A"))
        b = await client.post("production-events", json=tipping_payload(line_manager="B"))

        assert a.json()["shift_report_id"] != b.json()["shift_report_id"]
        assert len((await client.get("shift-aggregates")).json()) == 2

    @pytest.mark.parametrize(
        "overrides",
        [{"line_manager": ""}, {"bins_tipped": -1}, {"down_time": -5}, {"date": "not-a-date"}],
    )
    async def test_invalid_payload_is_400(self, client, tipping_payload, overrides):
        response = await client.post("production-events", json=tipping_payload(**overrides))

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")

    async def test_time_with_offset_is_business_time(self, client, tipping_payload):
        """A UTC time of day is stored as local wall-clock time"""
        await client.post("production-events", json=tipping_payload(date="2024-03-10T10:30:00"))
        created = await client.post(
            "production-events",
            json=tipping_payload(date="2024-03-09T22:00:00Z", time="22:00:00Z"),
        )

        assert created.status_code == 201
        assert created.json()["time"] == "11:00:00"
        reread = await client.get(f"production-events/{created.json()['id']}")
        assert reread.json()["time"] == "11:00:00"
        listed = await client.get("production-events", params={"date": "2024-03-10T00:00:00"})
        assert [t["time"] for t in listed.json()] == ["10:30:00", "11:00:00"]

    async def test_whitespace_manager_is_400(self, client, tipping_payload):
        response = await client.post("production-events", json=tipping_payload(line_manager="   "))

        assert response.status_code == 400
        assert response.json() == {"error": "line_manager is required"}

    async def test_rejected_event_creates_no_report(self, client, tipping_payload):
        await client.post("production-events", json=tipping_payload(line_manager="   "))

        assert (await client.get("shift-aggregates")).json() == []


class TestListProductionEvents:
    """GET /production-events"""

    async def test_filter_by_date_ordered_by_time(self, client, tipping_payload):
        await client.post("production-events", json=tipping_payload(date="2024-03-01T14:00:00"))
        await client.post("production-events", json=tipping_payload(date="2024-03-01T09:00:00", line_manager="B"))
        await client.post("production-events", json=tipping_payload(date="2024-03-02T09:00:00"))

        response = await client.get("production-events", params={"date": "2024-03-01T00:00:00"})

        assert response.status_code == 200
        assert [t["time"] for t in response.json()] == ["09:00:00", "14:00:00"]

    async def test_filter_by_range(self, client, tipping_payload):
        for day in ("2024-03-01", "2024-03-02", "2024-03-05"):
            await client.post("production-events", json=tipping_payload(date=f"{day}T09:00:00"))

        response = await client.get(
            "production-events",
            params={"startDate": "2024-03-01T00:00:00", "endDate": "2024-03-02T23:59:00"},
        )

        assert len(response.json()) == 2

    async def test_unfiltered(self, client, tipping_payload):
        await client.post("production-events", json=tipping_payload())
        await client.post("production-events", json=tipping_payload(line_manager="B"))

        assert len((await client.get("production-events")).json()) == 2


class TestGetProductionEvent:

    async def test_found(self, client, tipping_payload):
        created = (await client.post("production-events", json=tipping_payload())).json()

        response = await client.get(f"production-events/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    async def test_missing_is_404(self, client):
        response = await client.get("production-events/999")

        assert response.status_code == 404
        assert "error" in response.json()

    async def test_downtime_reasons(self, client):
        response = await client.get("production-events/downtime-reasons")

        values = [r["value"] for r in response.json()]
        assert "machine_breakdown" in values
        assert {"value": "lunch", "label": "Lunch"} in response.json()
