"""
Seat map endpoints
"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_session
from app.core.exceptions import ValidationError
from app.models.reservation import EventDay, SeatClaim
from app.models.seat import Seat, SeatBlock
from app.schemas.seat import SeatAvailabilityResponse, SeatMapResponse, SeatStatusResponse

router = APIRouter()


def _parse_days(days: Optional[str]) -> list:
    if not days:
        return list(EventDay)
    parsed = []
    for raw in days.split(","):
        raw = raw.strip()
        if not raw:
            continue
        try:
            day = EventDay(raw)
        except ValueError:
            raise ValidationError(f"Unknown day '{raw}'", field="days")
        if day not in parsed:
            parsed.append(day)
    return parsed or list(EventDay)


@router.get("", response_model=SeatMapResponse)
async def get_seat_map(
    day: EventDay,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Every seat with its state for one day
    """
    day = EventDay(day)
    result = await db.execute(
        select(Seat).order_by(Seat.block, Seat.row_number, Seat.seat_index)
    )
    seats = result.scalars().all()

    result = await db.execute(select(SeatClaim.seat_id).where(SeatClaim.day == day))
    reserved_ids = set(result.scalars().all())

    statuses = []
    blocks = {SeatBlock.LEFT.value: {}, SeatBlock.RIGHT.value: {}}
    for seat in seats:
        is_reserved = seat.id in reserved_ids
        seat_status = SeatStatusResponse(
            id=seat.id,
            seat_number=seat.seat_number,
            block=seat.block,
            row_number=seat.row_number,
            seat_index=seat.seat_index,
            category=seat.category,
            is_reserved=is_reserved,
            is_available=not is_reserved and not seat.is_vip,
        )
        statuses.append(seat_status)
        blocks[SeatBlock(seat.block).value].setdefault(seat.row_number, []).append(seat_status)

    return SeatMapResponse(
        day=day,
        total_seats=len(statuses),
        available_seats=sum(1 for s in statuses if s.is_available),
        seats=statuses,
        left_block=blocks[SeatBlock.LEFT.value],
        right_block=blocks[SeatBlock.RIGHT.value],
    )


@router.get("/availability", response_model=SeatAvailabilityResponse)
async def get_availability(
    days: Optional[str] = Query(None, description="Comma separated days, e.g. day1,day2"),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Reserved seat ids for each requested day
    """
    requested = _parse_days(days)
    result = await db.execute(
        select(SeatClaim.seat_id, SeatClaim.day)
        .where(SeatClaim.day.in_(requested))
        .order_by(SeatClaim.seat_id)
    )

    reserved = {day.value: [] for day in requested}
    for seat_id, day in result.all():
        reserved[EventDay(day).value].append(seat_id)

    return SeatAvailabilityResponse(reserved=reserved)
