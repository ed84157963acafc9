"""
Ticket Service
Ticket codes, QR payloads and QR code images
"""

import json
import logging
import re
import secrets
import string
from io import BytesIO
from typing import Optional

import qrcode
from PIL import Image as PILImage

from app.models.reservation import Reservation

logger = logging.getLogger(__name__)

TICKET_CODE_ALPHABET = string.ascii_uppercase + string.digits
MIN_TICKET_CODE_LENGTH = 8
TICKET_CODE_PATTERN = re.compile(r"^[A-Z0-9]{8,32}$")


class TicketGenerator:
    """Service for generating and reading event tickets"""

    @staticmethod
    def generate_ticket_code(length: int = 10) -> str:
        """Random uppercase alphanumeric code; uniqueness is checked by the caller"""
        if length < MIN_TICKET_CODE_LENGTH:
            raise ValueError(f"Ticket codes must be at least {MIN_TICKET_CODE_LENGTH} characters")
        return "".join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(length))

    @staticmethod
    def build_qr_payload(reservation: Reservation) -> str:
        """Data encoded in the ticket QR code"""
        return json.dumps(
            {"ticket_code": reservation.ticket_code, "email": reservation.email},
            separators=(",", ":"),
        )

    @staticmethod
    def parse_ticket_payload(qr_data: str) -> Optional[str]:
        """
        Extract the ticket code from scanned QR data.

        Accepts the JSON payload written by build_qr_payload or a bare
        ticket code typed in by hand. Returns None for anything else.
        """
        if not isinstance(qr_data, str):
            return None
        text = qr_data.strip()
        if not text:
            return None

        if text.startswith("{"):
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                return None
            if not isinstance(data, dict):
                return None
            code = data.get("ticket_code")
            if not isinstance(code, str):
                return None
            text = code.strip()

        code = text.upper()
        if not TICKET_CODE_PATTERN.match(code):
            return None
        return code

    @staticmethod
    def generate_qr_code(
        payload: str,
        size: int = 300,
        border: int = 4
    ) -> bytes:
        """Generate QR code PNG for ticket validation"""
        try:
            qr = qrcode.QRCode(
                version=1,
                error_correction=qrcode.constants.ERROR_CORRECT_H,
                box_size=10,
                border=border,
            )

            qr.add_data(payload)
            qr.make(fit=True)

            img = qr.make_image(fill_color="black", back_color="white").get_image()

            if size != img.size[0]:
                img = img.resize((size, size), PILImage.LANCZOS)

            buffer = BytesIO()
            img.save(buffer, format='PNG')
            return buffer.getvalue()

        except Exception as e:
            logger.error(f"Error generating QR code: {str(e)}")
            raise


# Initialize global ticket generator
ticket_generator = TicketGenerator()
