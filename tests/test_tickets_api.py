"""
Integration tests for ticket endpoints
"""

import pytest
import pytest_asyncio

API = "/api/v1"


@pytest_asyncio.fixture
async def ticket(client, seats, reservation_payload):
    response = await client.post(
        f"{API}/reservations", json=reservation_payload([(seats["L-6-3"], "day2")])
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
@pytest.mark.asyncio
class TestTicketLookup:
    """Test public ticket endpoints"""

    async def test_get_ticket(self, client, ticket):
        response = await client.get(f"{API}/tickets/{ticket['ticket_code']}")

        assert response.status_code == 200
        data = response.json()
        assert data["ticket_code"] == ticket["ticket_code"]
        assert data["qr_data"] == ticket["qr_data"]
        assert data["event_name"]
        assert data["reservation"]["seats"][0]["seat_number"] == "L-6-3"

    async def test_lookup_is_case_insensitive(self, client, ticket):
        response = await client.get(f"{API}/tickets/{ticket['ticket_code'].lower()}")
        assert response.status_code == 200

    async def test_unknown_ticket(self, client, seats):
        response = await client.get(f"{API}/tickets/NOSUCHCODE")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_qr_image(self, client, ticket):
        response = await client.get(f"{API}/tickets/{ticket['ticket_code']}/qr?size=150")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")


@pytest.mark.integration
@pytest.mark.asyncio
class TestTicketValidation:
    """Test admin ticket scanning"""

    async def _validate(self, client, headers, qr_data, mark_used=False):
        response = await client.post(
            f"{API}/tickets/validate",
            json={"qr_data": qr_data, "mark_used": mark_used},
            headers=headers,
        )
        assert response.status_code == 200
        return response.json()

    async def test_requires_admin(self, client, ticket):
        response = await client.post(
            f"{API}/tickets/validate", json={"qr_data": ticket["ticket_code"]}
        )
        assert response.status_code == 401

    async def test_scan_flow(self, client, ticket, admin_headers):
        preview = await self._validate(client, admin_headers, ticket["qr_data"])
        assert preview["status"] == "valid"
        assert preview["valid"] is True
        assert preview["is_used"] is False
        assert preview["scan_count"] == 1

        check_in = await self._validate(client, admin_headers, ticket["qr_data"], mark_used=True)
        assert check_in["status"] == "used"
        assert check_in["is_used"] is True
        assert check_in["reservation"]["used_at"] is not None
        assert check_in["scan_count"] == 2

        again = await self._validate(client, admin_headers, ticket["qr_data"], mark_used=True)
        assert again["status"] == "already_used"
        assert again["valid"] is False
        assert again["scan_count"] == 2

    async def test_unknown_ticket_is_not_an_error(self, client, ticket, admin_headers):
        result = await self._validate(client, admin_headers, "UNKNOWN123", mark_used=True)

        assert result["status"] == "unknown"
        assert result["valid"] is False
        assert result["reservation"] is None

    async def test_malformed_qr_data(self, client, ticket, admin_headers):
        result = await self._validate(client, admin_headers, '{"ticket_code": null}')

        assert result["status"] == "unknown"
        assert result["message"] == "Invalid QR code format"

    async def test_empty_body_rejected(self, client, ticket, admin_headers):
        response = await client.post(
            f"{API}/tickets/validate", json={"qr_data": ""}, headers=admin_headers
        )
        assert response.status_code == 422
