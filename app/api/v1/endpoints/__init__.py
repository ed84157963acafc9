"""
API endpoints module
"""

from . import reservations, tickets, seats, speakers, programs, statistics, monitoring, health

__all__ = [
    "reservations",
    "tickets",
    "seats",
    "speakers",
    "programs",
    "statistics",
    "monitoring",
    "health"
]
