"""
Integration tests for admin statistics
"""

import pytest

API = "/api/v1"


@pytest.mark.integration
@pytest.mark.asyncio
class TestStatistics:
    """Test statistics endpoints"""

    async def _reserve(self, client, payload):
        response = await client.post(f"{API}/reservations", json=payload)
        assert response.status_code == 201
        return response.json()

    async def test_requires_admin(self, client):
        assert (await client.get(f"{API}/statistics")).status_code == 401
        assert (await client.get(f"{API}/statistics/scans")).status_code == 401

    async def test_empty(self, client, seats, admin_headers):
        response = await client.get(f"{API}/statistics", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_reservations"] == 0
        assert data["reservations_per_day"] == {"day1": 0, "day2": 0, "day3": 0}
        assert data["seat_occupancy"]["day1"] == {
            "total_seats": 80,
            "reserved_seats": 0,
            "available_seats": 80,
            "occupancy_rate": 0.0,
        }

    async def test_overview(self, client, seats, admin_headers, reservation_payload):
        first = await self._reserve(client, reservation_payload(
            [(seats["L-3-1"], "day1"), (seats["L-3-2"], "day1"), (seats["L-3-1"], "day2")],
            role="student",
        ))
        await self._reserve(client, reservation_payload([(seats["R-3-1"], "day1")]))

        await client.post(
            f"{API}/tickets/validate",
            json={"qr_data": first["ticket_code"], "mark_used": True},
            headers=admin_headers,
        )

        data = (await client.get(f"{API}/statistics", headers=admin_headers)).json()

        assert data["total_reservations"] == 2
        assert data["reservations_per_day"] == {"day1": 2, "day2": 1, "day3": 0}
        assert data["role_distribution"] == {"student": 1, "employee": 1}
        assert data["tickets"] == {"used": 1, "unused": 1}
        assert data["seat_occupancy"]["day1"]["reserved_seats"] == 3
        assert data["seat_occupancy"]["day1"]["available_seats"] == 77
        assert data["seat_occupancy"]["day1"]["occupancy_rate"] == 3.8
        assert data["seat_occupancy"]["day2"]["reserved_seats"] == 1

    async def test_scan_statistics(self, client, seats, admin_headers, reservation_payload):
        first = await self._reserve(client, reservation_payload([(seats["L-4-1"], "day1")]))
        second = await self._reserve(client, reservation_payload([(seats["L-4-2"], "day1")]))
        await self._reserve(client, reservation_payload([(seats["L-4-3"], "day1")]))

        for qr_data, mark_used in [
            (first["ticket_code"], False),
            (first["ticket_code"], True),
            (second["ticket_code"], False),
        ]:
            await client.post(
                f"{API}/tickets/validate",
                json={"qr_data": qr_data, "mark_used": mark_used},
                headers=admin_headers,
            )

        data = (await client.get(f"{API}/statistics/scans", headers=admin_headers)).json()

        assert data["total_reservations"] == 3
        assert data["scanned_reservations"] == 2
        assert data["total_scans"] == 3
        assert data["scan_rate"] == 66.67
        assert {r["ticket_code"] for r in data["recent_scans"]} == {
            first["ticket_code"],
            second["ticket_code"],
        }
