"""
Pydantic schemas for request and response validation
"""

from app.schemas.reservation import (
    SeatSelection,
    ReservationCreate,
    ReservationResponse,
    ReservationCreatedResponse,
    ClaimResponse
)
from app.schemas.ticket import (
    TicketResponse,
    TicketValidationRequest,
    TicketValidationResponse
)
from app.schemas.seat import (
    SeatResponse,
    SeatStatusResponse,
    SeatMapResponse,
    SeatAvailabilityResponse
)
from app.schemas.speaker import (
    SpeakerCreate,
    SpeakerUpdate,
    SpeakerResponse,
    SpeakerDetail,
    ProgramCreate,
    ProgramUpdate,
    ProgramResponse
)
from app.schemas.response import (
    ErrorResponse,
    MessageResponse
)

__all__ = [
    "SeatSelection",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationCreatedResponse",
    "ClaimResponse",
    "TicketResponse",
    "TicketValidationRequest",
    "TicketValidationResponse",
    "SeatResponse",
    "SeatStatusResponse",
    "SeatMapResponse",
    "SeatAvailabilityResponse",
    "SpeakerCreate",
    "SpeakerUpdate",
    "SpeakerResponse",
    "SpeakerDetail",
    "ProgramCreate",
    "ProgramUpdate",
    "ProgramResponse",
    "ErrorResponse",
    "MessageResponse",
]
