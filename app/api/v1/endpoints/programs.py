"""
Program (schedule) endpoints
"""

from typing import Any, List, Optional
import logging
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.database import get_session, transaction
from app.core.exceptions import NotFoundError, ValidationError
from app.core.security import require_admin
from app.models.program import Program
from app.models.reservation import EventDay
from app.models.speaker import Speaker
from app.schemas.base import MAX_ID
from app.schemas.response import MessageResponse
from app.schemas.speaker import ProgramCreate, ProgramResponse, ProgramUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


async def _load_program(db: AsyncSession, program_id: int) -> Program:
    result = await db.execute(
        select(Program)
        .options(selectinload(Program.speaker))
        .where(Program.id == program_id)
        .execution_options(populate_existing=True)
    )
    program = result.scalar_one_or_none()
    if not program:
        raise NotFoundError("Program", program_id)
    return program


async def _ensure_speaker(db: AsyncSession, speaker_id: Optional[int]) -> None:
    if speaker_id is None:
        return
    result = await db.execute(select(Speaker.id).where(Speaker.id == speaker_id))
    if result.first() is None:
        raise NotFoundError("Speaker", speaker_id)


@router.get("", response_model=List[ProgramResponse])
async def list_programs(
    day: Optional[EventDay] = None,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Event schedule ordered by day and start time
    """
    query = select(Program).options(selectinload(Program.speaker))
    if day:
        query = query.where(Program.day == EventDay(day))
    query = query.order_by(Program.day, Program.start_time, Program.id)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program(
    program_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Get program details
    """
    return await _load_program(db, program_id)


@router.post(
    "",
    response_model=ProgramResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)]
)
async def create_program(
    program_in: ProgramCreate,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Add a session to the schedule (admin only)
    """
    async with transaction(db):
        await _ensure_speaker(db, program_in.speaker_id)
        program = Program(**program_in.model_dump())
        db.add(program)
        await db.flush()
        program_id = program.id

    logger.info(f"Program created: {program_id}")
    return await _load_program(db, program_id)


@router.put(
    "/{program_id}",
    response_model=ProgramResponse,
    dependencies=[Depends(require_admin)]
)
async def update_program(
    program_update: ProgramUpdate,
    program_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Update a session (admin only)
    """
    update_data = program_update.model_dump(exclude_unset=True)

    async with transaction(db):
        program = await _load_program(db, program_id)

        for field, value in update_data.items():
            if value is None and field != "speaker_id":
                raise ValidationError(f"{field} cannot be null", field=field)
        if "speaker_id" in update_data:
            await _ensure_speaker(db, update_data["speaker_id"])

        start_time = update_data.get("start_time", program.start_time)
        end_time = update_data.get("end_time", program.end_time)
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time", field="end_time")

        for field, value in update_data.items():
            setattr(program, field, value)

    return await _load_program(db, program_id)


@router.delete(
    "/{program_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)]
)
async def delete_program(
    program_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Remove a session from the schedule (admin only)
    """
    async with transaction(db):
        program = await _load_program(db, program_id)
        await db.delete(program)

    logger.info(f"Program deleted: {program_id}")
    return MessageResponse(message="Program deleted successfully")
