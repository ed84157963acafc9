"""
Main API Router
Aggregates all API endpoints for v1
"""

from fastapi import APIRouter
from app.api.v1.endpoints import (
    reservations,
    tickets,
    seats,
    speakers,
    programs,
    statistics,
    monitoring,
    health
)

api_router = APIRouter()

# Include all routers
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
api_router.include_router(seats.router, prefix="/seats", tags=["seats"])
api_router.include_router(speakers.router, prefix="/speakers", tags=["speakers"])
api_router.include_router(programs.router, prefix="/programs", tags=["programs"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
api_router.include_router(monitoring.router, prefix="/monitoring", tags=["monitoring"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
