"""
Monitoring endpoints for the reservation core
"""

from typing import Any
import logging
from fastapi import APIRouter, Depends

from app.core.metrics import metrics_collector
from app.core.security import require_admin
from app.schemas.response import MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/metrics")
async def get_reservation_metrics() -> Any:
    """
    In-process reservation and ticket scan counters
    """
    return await metrics_collector.get_metrics()


@router.post("/metrics/reset", response_model=MessageResponse)
async def reset_reservation_metrics() -> Any:
    """
    Reset the in-process counters
    """
    await metrics_collector.reset_metrics()
    return MessageResponse(message="Metrics reset")
