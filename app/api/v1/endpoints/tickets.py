"""
Ticket endpoints: lookup, QR image and scanning
"""

from typing import Any
import logging
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_session
from app.core.exceptions import NotFoundError
from app.core.security import require_admin, scan_rate_limiter
from app.models.reservation import Reservation
from app.schemas.reservation import ReservationResponse
from app.schemas.ticket import TicketResponse, TicketValidationRequest, TicketValidationResponse
from app.services.seat_ledger import SeatLedger, get_seat_ledger, reservation_query
from app.services.ticket_service import ticket_generator

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_by_code(db: AsyncSession, ticket_code: str) -> Reservation:
    code = ticket_code.strip().upper()
    result = await db.execute(reservation_query().where(Reservation.ticket_code == code))
    reservation = result.scalar_one_or_none()
    if not reservation:
        raise NotFoundError("Ticket", code)
    return reservation


@router.post(
    "/validate",
    response_model=TicketValidationResponse,
    dependencies=[Depends(require_admin), Depends(scan_rate_limiter)]
)
async def validate_ticket(
    request: TicketValidationRequest,
    db: AsyncSession = Depends(get_session),
    ledger: SeatLedger = Depends(get_seat_ledger)
) -> Any:
    """
    Check a scanned QR code; with mark_used the attendee is checked in.
    Every outcome, including unknown tickets, is a 200 response.
    """
    outcome = await ledger.validate_ticket(db, request.qr_data, mark_used=request.mark_used)
    reservation = outcome.reservation

    return TicketValidationResponse(
        valid=outcome.valid,
        status=outcome.status,
        message=outcome.message,
        is_used=reservation.is_used if reservation else None,
        scan_count=reservation.scan_count if reservation else None,
        last_scanned_at=reservation.last_scanned_at if reservation else None,
        reservation=ReservationResponse.from_reservation(reservation) if reservation else None,
    )


@router.get("/{ticket_code}", response_model=TicketResponse)
async def get_ticket(
    ticket_code: str,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Get a ticket by its code
    """
    reservation = await _get_by_code(db, ticket_code)

    return TicketResponse(
        event_name=settings.EVENT_NAME,
        event_location=settings.EVENT_LOCATION,
        ticket_code=reservation.ticket_code,
        qr_data=ticket_generator.build_qr_payload(reservation),
        reservation=ReservationResponse.from_reservation(reservation),
    )


@router.get(
    "/{ticket_code}/qr",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}}
)
async def get_ticket_qr(
    ticket_code: str,
    size: int = Query(300, ge=100, le=1000),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    QR code image for a ticket
    """
    reservation = await _get_by_code(db, ticket_code)
    png = ticket_generator.generate_qr_code(
        ticket_generator.build_qr_payload(reservation), size=size
    )
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="ticket-{reservation.ticket_code}.png"'},
    )
