"""
Seat seeding for the conference hall
"""
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.models.seat import Seat, SeatBlock, SeatCategory

logger = logging.getLogger(__name__)

ROWS_PER_BLOCK = 10
SEATS_PER_ROW = 5
VIP_ROWS = (1, 2)

_BLOCK_PREFIX = {SeatBlock.LEFT: "L", SeatBlock.RIGHT: "R"}


def seat_number(block: SeatBlock, row: int, index: int) -> str:
    return f"{_BLOCK_PREFIX[block]}-{row}-{index}"


def build_seats() -> List[Seat]:
    """Both blocks, front row first; the first rows of each block are VIP"""
    seats = []
    for block in SeatBlock:
        for row in range(1, ROWS_PER_BLOCK + 1):
            category = SeatCategory.VIP if row in VIP_ROWS else SeatCategory.REGULAR
            for index in range(1, SEATS_PER_ROW + 1):
                seats.append(Seat(
                    seat_number=seat_number(block, row, index),
                    block=block,
                    row_number=row,
                    seat_index=index,
                    category=category,
                ))
    return seats


async def seed_seats(session_factory: async_sessionmaker) -> int:
    """Create the seat map if the seats table is empty. Returns seats created."""
    async with session_factory() as session:
        async with session.begin():
            result = await session.execute(select(func.count(Seat.id)))
            if result.scalar():
                logger.info("Seats already seeded, skipping")
                return 0

            seats = build_seats()
            session.add_all(seats)

    logger.info(f"Seeded {len(seats)} seats")
    return len(seats)
