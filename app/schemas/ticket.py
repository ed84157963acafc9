"""
Ticket schemas
"""

from typing import Optional
from datetime import datetime
from pydantic import Field

from app.schemas.base import BaseSchema
from app.schemas.reservation import ReservationResponse


class TicketValidationRequest(BaseSchema):
    """Payload read from a scanned QR code"""
    qr_data: str = Field(..., min_length=1, max_length=2048)
    mark_used: bool = False


class TicketValidationResponse(BaseSchema):
    valid: bool
    status: str
    message: str
    is_used: Optional[bool] = None
    scan_count: Optional[int] = None
    last_scanned_at: Optional[datetime] = None
    reservation: Optional[ReservationResponse] = None


class TicketResponse(BaseSchema):
    """Everything a client needs to render the ticket"""
    event_name: str
    event_location: str
    ticket_code: str
    qr_data: str
    reservation: ReservationResponse
