"""
Speaker endpoints
"""

from typing import Any, List, Optional
import logging
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.database import get_session, transaction
from app.core.exceptions import NotFoundError, ValidationError
from app.core.security import require_admin
from app.models.speaker import Speaker
from app.schemas.base import MAX_ID
from app.schemas.response import MessageResponse
from app.schemas.speaker import SpeakerCreate, SpeakerDetail, SpeakerResponse, SpeakerUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


async def _load_speaker(db: AsyncSession, speaker_id: int) -> Speaker:
    result = await db.execute(
        select(Speaker)
        .options(selectinload(Speaker.programs))
        .where(Speaker.id == speaker_id)
        .execution_options(populate_existing=True)
    )
    speaker = result.scalar_one_or_none()
    if not speaker:
        raise NotFoundError("Speaker", speaker_id)
    return speaker


@router.get("", response_model=List[SpeakerDetail])
async def list_speakers(
    db: AsyncSession = Depends(get_session),
    search: Optional[str] = Query(None, max_length=255),
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: int = Query(100, ge=1, le=500)
) -> Any:
    """
    List speakers with their sessions
    """
    query = select(Speaker).options(selectinload(Speaker.programs))
    if search and search.strip():
        query = query.where(Speaker.name.ilike(f"%{search.strip()}%"))
    query = query.order_by(Speaker.name, Speaker.id).offset(skip).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{speaker_id}", response_model=SpeakerDetail)
async def get_speaker(
    speaker_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Get speaker details
    """
    return await _load_speaker(db, speaker_id)


@router.post(
    "",
    response_model=SpeakerResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)]
)
async def create_speaker(
    speaker_in: SpeakerCreate,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Create new speaker (admin only)
    """
    async with transaction(db):
        speaker = Speaker(**speaker_in.model_dump(mode="json"))
        db.add(speaker)
        await db.flush()
        speaker_id = speaker.id

    logger.info(f"Speaker created: {speaker_id}")
    return await _load_speaker(db, speaker_id)


@router.put(
    "/{speaker_id}",
    response_model=SpeakerResponse,
    dependencies=[Depends(require_admin)]
)
async def update_speaker(
    speaker_update: SpeakerUpdate,
    speaker_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Update speaker (admin only)
    """
    async with transaction(db):
        speaker = await _load_speaker(db, speaker_id)
        for field, value in speaker_update.model_dump(exclude_unset=True, mode="json").items():
            if value is None and field != "photo_url":
                raise ValidationError(f"{field} cannot be null", field=field)
            setattr(speaker, field, value)

    return await _load_speaker(db, speaker_id)


@router.delete(
    "/{speaker_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)]
)
async def delete_speaker(
    speaker_id: int = Path(..., ge=1, le=MAX_ID),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Delete speaker; their sessions stay on the schedule without a speaker
    """
    async with transaction(db):
        speaker = await _load_speaker(db, speaker_id)
        await db.delete(speaker)

    logger.info(f"Speaker deleted: {speaker_id}")
    return MessageResponse(message="Speaker deleted successfully")
