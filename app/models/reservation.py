"""
Reservation and SeatClaim models
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import enum

from app.models.base import BaseModel


class EventDay(str, enum.Enum):
    DAY1 = "day1"
    DAY2 = "day2"
    DAY3 = "day3"


class AttendeeRole(str, enum.Enum):
    STUDENT = "student"
    EMPLOYEE = "employee"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


event_day_type = Enum(EventDay, values_callable=_enum_values, name="event_day")


class Reservation(BaseModel):
    """
    An attendee's booking. Owns its seat claims: deleting the
    reservation deletes every claim with it.
    """
    __tablename__ = "reservations"

    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    role = Column(
        Enum(AttendeeRole, values_callable=_enum_values, name="attendee_role"),
        nullable=False,
        index=True
    )
    institution_name = Column(String(255), nullable=True)
    days = Column(JSON, nullable=False)
    ticket_code = Column(String(32), unique=True, nullable=False, index=True)
    is_used = Column(Boolean, default=False, nullable=False, index=True)
    used_at = Column(DateTime(timezone=True), nullable=True)
    scan_count = Column(Integer, default=0, server_default="0", nullable=False)
    last_scanned_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    claims = relationship(
        "SeatClaim",
        back_populates="reservation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SeatClaim.id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Reservation(id={self.id}, ticket={self.ticket_code}, role={self.role}, used={self.is_used})>"


class SeatClaim(BaseModel):
    """
    One claimed (seat, day) pair. The unique constraint is what keeps
    two reservations from holding the same seat on the same day.
    """
    __tablename__ = "seat_claims"
    __table_args__ = (
        UniqueConstraint('seat_id', 'day', name='uq_seat_claims_seat_day'),
    )

    reservation_id = Column(
        Integer,
        ForeignKey("reservations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    seat_id = Column(Integer, ForeignKey("seats.id"), nullable=False)
    day = Column(
        event_day_type,
        nullable=False,
        index=True
    )

    # Relationships
    reservation = relationship("Reservation", back_populates="claims")
    seat = relationship("Seat", back_populates="claims")

    def __repr__(self):
        return f"<SeatClaim(reservation_id={self.reservation_id}, seat_id={self.seat_id}, day={self.day})>"
