"""
Unit tests for ticket codes and QR payloads
"""

import json
import pytest
from io import BytesIO
from PIL import Image

from app.models.reservation import Reservation
from app.services.ticket_service import TICKET_CODE_ALPHABET, ticket_generator


@pytest.mark.unit
class TestTicketCodes:
    """Test ticket code generation"""

    def test_default_length_and_alphabet(self):
        code = ticket_generator.generate_ticket_code()

        assert len(code) == 10
        assert all(ch in TICKET_CODE_ALPHABET for ch in code)
        assert code == code.upper()

    def test_custom_length(self):
        assert len(ticket_generator.generate_ticket_code(16)) == 16

    def test_too_short_length_rejected(self):
        with pytest.raises(ValueError):
            ticket_generator.generate_ticket_code(6)

    def test_ten_thousand_codes_are_distinct(self):
        codes = {ticket_generator.generate_ticket_code() for _ in range(10_000)}
        assert len(codes) == 10_000


@pytest.mark.unit
class TestQrPayload:
    """Test QR payload encoding and parsing"""

    def _reservation(self):
        return Reservation(ticket_code="AB12CD34EF", email="amina@example.com")

    def test_build_payload(self):
        payload = ticket_generator.build_qr_payload(self._reservation())

        assert json.loads(payload) == {"ticket_code": "AB12CD34EF", "email": "amina@example.com"}
        assert " " not in payload

    def test_parse_built_payload(self):
        payload = ticket_generator.build_qr_payload(self._reservation())
        assert ticket_generator.parse_ticket_payload(payload) == "AB12CD34EF"

    def test_parse_bare_code(self):
        assert ticket_generator.parse_ticket_payload("AB12CD34EF") == "AB12CD34EF"

    def test_parse_bare_code_normalizes_case_and_whitespace(self):
        assert ticket_generator.parse_ticket_payload("  ab12cd34ef\n") == "AB12CD34EF"

    @pytest.mark.parametrize("qr_data", [
        "",
        "   ",
        "{not json",
        "[]",
        '["AB12CD34EF"]',
        '{"email": "amina@example.com"}',
        '{"ticket_code": 12345678}',
        '{"ticket_code": "AB-12"}',
        "SHORT1",
        "AB12CD34EF!",
        "https://example.com/ticket/AB12CD34EF",
    ])
    def test_malformed_payloads(self, qr_data):
        assert ticket_generator.parse_ticket_payload(qr_data) is None


@pytest.mark.unit
class TestQrImage:
    """Test QR image rendering"""

    def test_png_output(self):
        png = ticket_generator.generate_qr_code('{"ticket_code":"AB12CD34EF"}', size=200)

        assert png.startswith(b"\x89PNG")
        image = Image.open(BytesIO(png))
        assert image.size == (200, 200)
