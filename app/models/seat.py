"""
Seat model
"""

from sqlalchemy import Column, String, Integer, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from app.models.base import BaseModel


class SeatBlock(str, enum.Enum):
    LEFT = "left"
    RIGHT = "right"


class SeatCategory(str, enum.Enum):
    REGULAR = "regular"
    VIP = "vip"


class Seat(BaseModel):
    """
    Physical seat in the venue. Static reference data: created once
    by the seeding routine, never deleted or moved.
    """
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint('block', 'row_number', 'seat_index', name='uq_seat_position'),
    )

    seat_number = Column(String(20), unique=True, nullable=False, index=True)
    block = Column(
        Enum(SeatBlock, values_callable=lambda e: [m.value for m in e], name="seat_block"),
        nullable=False
    )
    row_number = Column(Integer, nullable=False)
    seat_index = Column(Integer, nullable=False)
    category = Column(
        Enum(SeatCategory, values_callable=lambda e: [m.value for m in e], name="seat_category"),
        default=SeatCategory.REGULAR,
        nullable=False,
        index=True
    )

    # Relationships
    claims = relationship("SeatClaim", back_populates="seat")

    @property
    def is_vip(self) -> bool:
        return self.category == SeatCategory.VIP

    def __repr__(self):
        return f"<Seat(id={self.id}, number={self.seat_number}, block={self.block}, row={self.row_number}, index={self.seat_index}, category={self.category})>"
