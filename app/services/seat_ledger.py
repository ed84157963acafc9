"""
Seat ledger: admission control for (seat, day) claims.

Every reservation is created in one unit of work that writes the
reservation row and all of its claims, or nothing. The UNIQUE(seat_id, day)
constraint on seat_claims decides races; the pre-check inside the
transaction only gives the fast path and names the first conflicting pair.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.core.database import transaction
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    TicketCodeExhaustedError,
    ValidationError,
)
from app.core.metrics import metrics_collector
from app.models.reservation import EventDay, Reservation, SeatClaim
from app.models.seat import Seat
from app.schemas.reservation import ReservationCreate
from app.services.ticket_service import ticket_generator

logger = logging.getLogger(__name__)

Pair = Tuple[int, EventDay]

TICKET_VALID = "valid"
TICKET_USED = "used"
TICKET_ALREADY_USED = "already_used"
TICKET_UNKNOWN = "unknown"


@dataclass
class TicketValidationResult:
    """Outcome of one ticket scan"""
    status: str
    message: str
    reservation: Optional[Reservation] = None

    @property
    def valid(self) -> bool:
        return self.status in (TICKET_VALID, TICKET_USED)


def reservation_query():
    """Reservation select with claims and their seats eagerly loaded"""
    return (
        select(Reservation)
        .options(selectinload(Reservation.claims).selectinload(SeatClaim.seat))
        .execution_options(populate_existing=True)
    )


def _ordered_days(days: Iterable) -> List[str]:
    order = list(EventDay)
    return [d.value for d in sorted({EventDay(d) for d in days}, key=order.index)]


class SeatLedger:
    """Creates, releases and checks in reservations"""

    def __init__(self, code_length: int = 10, max_attempts: int = 5):
        self.code_length = code_length
        self.max_attempts = max_attempts

    async def try_reserve(self, db: AsyncSession, request: ReservationCreate) -> Reservation:
        """
        Reserve every requested (seat, day) pair for one attendee.

        Raises NotFoundError for an unknown seat, ValidationError when any
        seat is VIP, ConflictError naming the first pair already claimed,
        and StoreError when the store fails. On any error nothing is written.
        """
        pairs: List[Pair] = [(s.seat_id, EventDay(s.day)) for s in request.seats]

        async with metrics_collector.track_reservation():
            try:
                async with transaction(db):
                    seats = await self._load_seats(db, pairs)

                    conflict = await self._first_taken_pair(db, pairs)
                    if conflict is not None:
                        seat_id, day = conflict
                        raise ConflictError(seat_id, day.value, seats[seat_id].seat_number)

                    ticket_code = await self._unique_ticket_code(db)
                    reservation = Reservation(
                        first_name=request.first_name,
                        last_name=request.last_name,
                        email=str(request.email),
                        phone=request.phone,
                        role=request.role,
                        institution_name=request.institution_name,
                        days=_ordered_days(request.days),
                        ticket_code=ticket_code,
                        is_used=False,
                        scan_count=0,
                    )
                    reservation.claims = [
                        SeatClaim(seat_id=seat_id, day=day) for seat_id, day in pairs
                    ]
                    db.add(reservation)
                    await db.flush()

                    result = await db.execute(
                        reservation_query().where(Reservation.id == reservation.id)
                    )
                    reservation = result.scalar_one()

            except IntegrityError as e:
                # Lost a race on UNIQUE(seat_id, day) or on the ticket code
                conflict = await self._taken_after_rollback(db, pairs)
                if conflict is None:
                    logger.error(f"Reservation insert failed without a seat conflict: {e}")
                    raise StoreError() from e
                seat_id, day, seat_number = conflict
                logger.info(
                    "Seat conflict detected by constraint",
                    extra={"seat_id": seat_id, "day": day.value},
                )
                raise ConflictError(seat_id, day.value, seat_number) from e
            except SQLAlchemyError as e:
                logger.error(f"Reservation store failure: {e}")
                raise StoreError() from e

        logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "ticket_code": reservation.ticket_code,
                "claims": len(pairs),
            },
        )
        return reservation

    async def release_reservation(self, db: AsyncSession, reservation_id: int) -> None:
        """Delete a reservation together with all of its claims"""
        try:
            async with transaction(db):
                result = await db.execute(
                    select(Reservation)
                    .options(selectinload(Reservation.claims))
                    .where(Reservation.id == reservation_id)
                )
                reservation = result.scalar_one_or_none()
                if reservation is None:
                    raise NotFoundError("Reservation", reservation_id)
                claim_count = len(reservation.claims)
                await db.delete(reservation)
        except SQLAlchemyError as e:
            logger.error(f"Failed to release reservation {reservation_id}: {e}")
            raise StoreError() from e

        await metrics_collector.record_release()
        logger.info(
            "Reservation released",
            extra={"reservation_id": reservation_id, "claims": claim_count},
        )

    async def validate_ticket(
        self,
        db: AsyncSession,
        qr_data: str,
        mark_used: bool = False
    ) -> TicketValidationResult:
        """
        Check a scanned ticket, optionally checking the attendee in.

        The scan and the check-in are one conditional update on an unused
        ticket, so two scanners racing on the same code admit it once.
        """
        ticket_code = ticket_generator.parse_ticket_payload(qr_data)
        if ticket_code is None:
            outcome = TicketValidationResult(TICKET_UNKNOWN, "Invalid QR code format")
            await self._record_scan(outcome, qr_data=qr_data)
            return outcome

        now = datetime.now(timezone.utc)
        values = {
            "scan_count": Reservation.scan_count + 1,
            "last_scanned_at": now,
        }
        if mark_used:
            values.update(is_used=True, used_at=now)

        try:
            async with transaction(db):
                result = await db.execute(
                    update(Reservation)
                    .where(
                        Reservation.ticket_code == ticket_code,
                        Reservation.is_used.is_(False),
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                updated = result.rowcount == 1

                found = await db.execute(
                    reservation_query().where(Reservation.ticket_code == ticket_code)
                )
                reservation = found.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Ticket validation store failure: {e}")
            raise StoreError() from e

        if updated and mark_used:
            outcome = TicketValidationResult(TICKET_USED, "Ticket validated, attendee checked in", reservation)
        elif updated:
            outcome = TicketValidationResult(TICKET_VALID, "Ticket is valid", reservation)
        elif reservation is None:
            outcome = TicketValidationResult(TICKET_UNKNOWN, "Ticket not found")
        else:
            outcome = TicketValidationResult(TICKET_ALREADY_USED, "Ticket has already been used", reservation)

        await self._record_scan(outcome, ticket_code=ticket_code)
        return outcome

    async def _load_seats(self, db: AsyncSession, pairs: Sequence[Pair]) -> Dict[int, Seat]:
        seat_ids = {seat_id for seat_id, _ in pairs}
        result = await db.execute(select(Seat).where(Seat.id.in_(seat_ids)))
        seats = {seat.id: seat for seat in result.scalars().all()}

        # VIP rejection wins over unknown seats in the same request
        vip = sorted(seat.seat_number for seat in seats.values() if seat.is_vip)
        if vip:
            raise ValidationError(
                "VIP seats cannot be reserved",
                field="seats",
                details={"seat_numbers": vip},
            )

        for seat_id, _ in pairs:
            if seat_id not in seats:
                raise NotFoundError("Seat", seat_id)
        return seats

    async def _first_taken_pair(self, db: AsyncSession, pairs: Sequence[Pair]) -> Optional[Pair]:
        taken = await self._claimed(db, pairs)
        for pair in pairs:
            if pair in taken:
                return pair
        return None

    async def _claimed(self, db: AsyncSession, pairs: Sequence[Pair]) -> Dict[Pair, str]:
        """Currently claimed pairs among the given ones, with their seat numbers"""
        result = await db.execute(
            select(SeatClaim.seat_id, SeatClaim.day, Seat.seat_number)
            .join(Seat, Seat.id == SeatClaim.seat_id)
            .where(or_(*[
                and_(SeatClaim.seat_id == seat_id, SeatClaim.day == day)
                for seat_id, day in pairs
            ]))
        )
        return {(row.seat_id, EventDay(row.day)): row.seat_number for row in result}

    async def _taken_after_rollback(
        self,
        db: AsyncSession,
        pairs: Sequence[Pair]
    ) -> Optional[Tuple[int, EventDay, str]]:
        try:
            async with transaction(db):
                taken = await self._claimed(db, pairs)
        except SQLAlchemyError as e:
            logger.error(f"Could not re-read claims after constraint failure: {e}")
            raise StoreError() from e

        for seat_id, day in pairs:
            if (seat_id, day) in taken:
                return seat_id, day, taken[(seat_id, day)]
        return None

    async def _unique_ticket_code(self, db: AsyncSession) -> str:
        for _ in range(self.max_attempts):
            code = ticket_generator.generate_ticket_code(self.code_length)
            result = await db.execute(
                select(Reservation.id).where(Reservation.ticket_code == code)
            )
            if result.first() is None:
                return code
            logger.warning("Ticket code collision, regenerating")
        raise TicketCodeExhaustedError(self.max_attempts)

    async def _record_scan(self, outcome: TicketValidationResult, **context) -> None:
        await metrics_collector.record_ticket_scan(outcome.status)
        log = logger.warning if outcome.status == TICKET_UNKNOWN else logger.info
        log(f"Ticket scan: {outcome.status}", extra=context)


def get_seat_ledger() -> SeatLedger:
    """Dependency returning a ledger built from settings"""
    return SeatLedger(
        code_length=settings.TICKET_CODE_LENGTH,
        max_attempts=settings.TICKET_CODE_MAX_ATTEMPTS,
    )
