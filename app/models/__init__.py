"""
Database models
"""

from app.models.seat import Seat, SeatBlock, SeatCategory
from app.models.reservation import AttendeeRole, EventDay, Reservation, SeatClaim
from app.models.speaker import Speaker
from app.models.program import Program

__all__ = [
    "Seat",
    "SeatBlock",
    "SeatCategory",
    "Reservation",
    "SeatClaim",
    "EventDay",
    "AttendeeRole",
    "Speaker",
    "Program",
]
