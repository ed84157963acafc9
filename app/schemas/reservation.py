"""
Reservation schemas
"""

import re
from pydantic import EmailStr, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime

from app.schemas.base import MAX_ID, BaseSchema, IDSchema, TimestampSchema
from app.models.reservation import AttendeeRole, EventDay, Reservation
from app.config import settings

PHONE_PATTERN = re.compile(r"^\+?[0-9()\-\s]{6,20}$")


class SeatSelection(BaseSchema):
    """One requested (seat, day) pair"""
    seat_id: int = Field(..., gt=0, le=MAX_ID)
    day: EventDay


class ReservationCreate(BaseSchema):
    """Reservation creation schema"""
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    role: AttendeeRole
    institution_name: Optional[str] = Field(None, max_length=255)
    days: List[EventDay] = Field(..., min_length=1, max_length=len(EventDay))
    seats: List[SeatSelection] = Field(
        ..., min_length=1, max_length=settings.MAX_SEATS_PER_RESERVATION
    )

    @field_validator('first_name', 'last_name', 'phone')
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Field must not be blank')
        return v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not PHONE_PATTERN.match(v):
            raise ValueError('Invalid phone number')
        return v

    @field_validator('institution_name')
    @classmethod
    def blank_institution_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            v = v.strip()
        return v or None

    @field_validator('days')
    @classmethod
    def validate_unique_days(cls, v):
        if len(v) != len(set(EventDay(d) for d in v)):
            raise ValueError('Duplicate days not allowed')
        return v

    @model_validator(mode='after')
    def validate_selection(self):
        if self.role == AttendeeRole.STUDENT.value and not self.institution_name:
            raise ValueError('institution_name is required for students')
        if self.role == AttendeeRole.EMPLOYEE.value:
            self.institution_name = None

        pairs = [(s.seat_id, EventDay(s.day)) for s in self.seats]
        if len(pairs) != len(set(pairs)):
            raise ValueError('Duplicate seat selections not allowed')

        requested_days = {EventDay(d) for d in self.days}
        selected_days = {day for _, day in pairs}
        if not selected_days <= requested_days:
            raise ValueError('Every seat selection must be for one of the requested days')
        if requested_days != selected_days:
            raise ValueError('Every requested day needs a seat selection')
        return self


class ClaimResponse(BaseSchema):
    """Claimed seat for one day"""
    seat_id: int
    seat_number: str
    day: EventDay


class ReservationResponse(IDSchema, TimestampSchema):
    """Reservation response schema"""
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    role: AttendeeRole
    institution_name: Optional[str] = None
    days: List[EventDay]
    ticket_code: str
    is_used: bool
    used_at: Optional[datetime] = None
    scan_count: int
    last_scanned_at: Optional[datetime] = None
    seats: List[ClaimResponse] = []

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationResponse":
        """Build the response from a reservation with claims and seats loaded"""
        return cls(
            id=reservation.id,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
            first_name=reservation.first_name,
            last_name=reservation.last_name,
            full_name=reservation.full_name,
            email=reservation.email,
            phone=reservation.phone,
            role=reservation.role,
            institution_name=reservation.institution_name,
            days=reservation.days,
            ticket_code=reservation.ticket_code,
            is_used=reservation.is_used,
            used_at=reservation.used_at,
            scan_count=reservation.scan_count,
            last_scanned_at=reservation.last_scanned_at,
            seats=[
                ClaimResponse(
                    seat_id=claim.seat_id,
                    seat_number=claim.seat.seat_number,
                    day=claim.day,
                )
                for claim in reservation.claims
            ],
        )


class ReservationCreatedResponse(BaseSchema):
    """Response for a newly created reservation"""
    message: str = "Reservation created successfully"
    ticket_code: str
    qr_data: str
    reservation: ReservationResponse
