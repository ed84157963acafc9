"""
Seat schemas for response models
"""

from typing import Dict, List

from app.schemas.base import BaseSchema
from app.models.reservation import EventDay
from app.models.seat import SeatBlock, SeatCategory


class SeatResponse(BaseSchema):
    id: int
    seat_number: str
    block: SeatBlock
    row_number: int
    seat_index: int
    category: SeatCategory


class SeatStatusResponse(SeatResponse):
    """Seat with its state for one day"""
    is_reserved: bool
    is_available: bool


class SeatMapResponse(BaseSchema):
    """Every seat for one day, flat and grouped by block then row"""
    day: EventDay
    total_seats: int
    available_seats: int
    seats: List[SeatStatusResponse]
    left_block: Dict[int, List[SeatStatusResponse]]
    right_block: Dict[int, List[SeatStatusResponse]]


class SeatAvailabilityResponse(BaseSchema):
    """Reserved seat ids keyed by day"""
    reserved: Dict[str, List[int]]
