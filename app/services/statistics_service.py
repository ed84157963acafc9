"""
Statistics Service
Read-only aggregates over reservations, seat claims and ticket scans
"""

from typing import Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, distinct
import logging

from app.models.reservation import AttendeeRole, EventDay, Reservation, SeatClaim
from app.models.seat import Seat, SeatCategory

logger = logging.getLogger(__name__)


def _percentage(part: int, whole: int, digits: int) -> float:
    if whole == 0:
        return 0.0
    return round(part / whole * 100, digits)


class StatisticsService:
    """Service for generating admin statistics"""

    @staticmethod
    async def get_overview(db: AsyncSession) -> Dict:
        """Totals, per-day counts, role split, check-ins and seat occupancy"""
        try:
            stats = {}

            result = await db.execute(select(func.count(Reservation.id)))
            stats["total_reservations"] = result.scalar() or 0

            # Reservations holding at least one claim on each day
            result = await db.execute(
                select(SeatClaim.day, func.count(distinct(SeatClaim.reservation_id)))
                .group_by(SeatClaim.day)
            )
            per_day = {EventDay(day).value: count for day, count in result.all()}
            stats["reservations_per_day"] = {
                day.value: per_day.get(day.value, 0) for day in EventDay
            }

            result = await db.execute(
                select(Reservation.role, func.count(Reservation.id))
                .group_by(Reservation.role)
            )
            per_role = {AttendeeRole(role).value: count for role, count in result.all()}
            stats["role_distribution"] = {
                role.value: per_role.get(role.value, 0) for role in AttendeeRole
            }

            result = await db.execute(
                select(func.count(Reservation.id)).where(Reservation.is_used.is_(True))
            )
            used = result.scalar() or 0
            stats["tickets"] = {
                "used": used,
                "unused": stats["total_reservations"] - used,
            }

            stats["seat_occupancy"] = await StatisticsService.get_seat_occupancy(db)
            return stats

        except Exception as e:
            logger.error(f"Error getting statistics overview: {str(e)}")
            raise

    @staticmethod
    async def get_seat_occupancy(db: AsyncSession) -> Dict[str, Dict]:
        """Bookable seats versus claimed seats for every day"""
        result = await db.execute(
            select(func.count(Seat.id)).where(Seat.category == SeatCategory.REGULAR)
        )
        bookable = result.scalar() or 0

        result = await db.execute(
            select(SeatClaim.day, func.count(SeatClaim.id))
            .join(Seat, Seat.id == SeatClaim.seat_id)
            .where(Seat.category == SeatCategory.REGULAR)
            .group_by(SeatClaim.day)
        )
        reserved_per_day = {EventDay(day).value: count for day, count in result.all()}

        occupancy = {}
        for day in EventDay:
            reserved = reserved_per_day.get(day.value, 0)
            occupancy[day.value] = {
                "total_seats": bookable,
                "reserved_seats": reserved,
                "available_seats": bookable - reserved,
                "occupancy_rate": _percentage(reserved, bookable, 1),
            }
        return occupancy

    @staticmethod
    async def get_scan_statistics(db: AsyncSession, recent_limit: int = 10) -> Dict:
        """Scan totals and the most recently scanned reservations"""
        try:
            result = await db.execute(select(func.count(Reservation.id)))
            total = result.scalar() or 0

            result = await db.execute(
                select(func.count(Reservation.id)).where(Reservation.scan_count > 0)
            )
            scanned = result.scalar() or 0

            result = await db.execute(select(func.coalesce(func.sum(Reservation.scan_count), 0)))
            total_scans = result.scalar() or 0

            result = await db.execute(
                select(Reservation)
                .where(Reservation.last_scanned_at.is_not(None))
                .order_by(Reservation.last_scanned_at.desc(), Reservation.id.desc())
                .limit(recent_limit)
            )
            recent: List[Dict] = [
                {
                    "id": r.id,
                    "full_name": r.full_name,
                    "ticket_code": r.ticket_code,
                    "is_used": r.is_used,
                    "scan_count": r.scan_count,
                    "last_scanned_at": r.last_scanned_at,
                }
                for r in result.scalars().all()
            ]

            return {
                "total_reservations": total,
                "scanned_reservations": scanned,
                "total_scans": int(total_scans),
                "scan_rate": _percentage(scanned, total, 2),
                "recent_scans": recent,
            }

        except Exception as e:
            logger.error(f"Error getting scan statistics: {str(e)}")
            raise


# Global instance
statistics_service = StatisticsService()
