"""
Reservation endpoints
"""

from typing import Any, List, Optional
import logging
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from app.core.database import get_session
from app.core.exceptions import NotFoundError
from app.core.security import require_admin, reservation_rate_limiter
from app.models.reservation import AttendeeRole, EventDay, Reservation, SeatClaim
from app.schemas.reservation import (
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationResponse,
)
from app.schemas.base import MAX_ID
from app.schemas.response import MessageResponse
from app.services.seat_ledger import SeatLedger, get_seat_ledger, reservation_query
from app.services.ticket_service import ticket_generator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ReservationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(reservation_rate_limiter)]
)
async def create_reservation(
    reservation_in: ReservationCreate,
    db: AsyncSession = Depends(get_session),
    ledger: SeatLedger = Depends(get_seat_ledger)
) -> Any:
    """
    Reserve seats for one or more event days and issue a ticket
    """
    reservation = await ledger.try_reserve(db, reservation_in)

    return ReservationCreatedResponse(
        ticket_code=reservation.ticket_code,
        qr_data=ticket_generator.build_qr_payload(reservation),
        reservation=ReservationResponse.from_reservation(reservation),
    )


@router.get(
    "",
    response_model=List[ReservationResponse],
    dependencies=[Depends(require_admin)]
)
async def list_reservations(
    db: AsyncSession = Depends(get_session),
    day: Optional[EventDay] = None,
    role: Optional[AttendeeRole] = None,
    search: Optional[str] = Query(None, max_length=255),
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: int = Query(50, ge=1, le=500)
) -> Any:
    """
    List reservations, newest first
    """
    query = reservation_query()

    filters = []
    if day:
        filters.append(
            Reservation.id.in_(
                select(SeatClaim.reservation_id).where(SeatClaim.day == EventDay(day))
            )
        )
    if role:
        filters.append(Reservation.role == AttendeeRole(role))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        filters.append(
            or_(
                Reservation.first_name.ilike(pattern),
                Reservation.last_name.ilike(pattern),
                Reservation.email.ilike(pattern),
                Reservation.ticket_code.ilike(pattern),
                Reservation.institution_name.ilike(pattern),
            )
        )

    if filters:
        query = query.where(*filters)

    query = query.order_by(Reservation.created_at.desc(), Reservation.id.desc())
    query = query.offset(skip).limit(limit)

    result = await db.execute(query)
    return [
        ReservationResponse.from_reservation(r) for r in result.scalars().all()
    ]


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    dependencies=[Depends(require_admin)]
)
async def get_reservation(
    reservation_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Get reservation details
    """
    result = await db.execute(reservation_query().where(Reservation.id == reservation_id))
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise NotFoundError("Reservation", reservation_id)

    return ReservationResponse.from_reservation(reservation)


@router.delete(
    "/{reservation_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)]
)
async def delete_reservation(
    reservation_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session),
    ledger: SeatLedger = Depends(get_seat_ledger)
) -> Any:
    """
    Delete a reservation and free its seats
    """
    await ledger.release_reservation(db, reservation_id)
    return MessageResponse(message="Reservation deleted successfully")
