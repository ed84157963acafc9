"""
Admin statistics endpoints
"""

from typing import Any
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.security import require_admin
from app.services.statistics_service import statistics_service

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("")
async def get_statistics(
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Reservation totals, role split, check-ins and seat occupancy per day
    """
    return await statistics_service.get_overview(db)


@router.get("/scans")
async def get_scan_statistics(
    recent: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Ticket scan totals and most recent scans
    """
    return await statistics_service.get_scan_statistics(db, recent_limit=recent)
