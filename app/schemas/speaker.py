"""
Speaker and program schemas
"""

from datetime import time
from typing import List, Optional
from pydantic import Field, HttpUrl, field_validator, model_validator

from app.schemas.base import MAX_ID, BaseSchema, IDSchema, TimestampSchema
from app.models.reservation import EventDay


class SpeakerBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    job_title: str = Field(..., min_length=1, max_length=255)
    bio: str = Field(..., min_length=1)
    photo_url: Optional[HttpUrl] = None


class SpeakerCreate(SpeakerBase):
    pass


class SpeakerUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    job_title: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = Field(None, min_length=1)
    photo_url: Optional[HttpUrl] = None


class SpeakerResponse(IDSchema, TimestampSchema):
    name: str
    job_title: str
    bio: str
    photo_url: Optional[str] = None


class ProgramBase(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    day: EventDay
    start_time: time
    end_time: time
    speaker_id: Optional[int] = Field(None, gt=0, le=MAX_ID)


class ProgramCreate(ProgramBase):

    @model_validator(mode='after')
    def validate_time_range(self):
        if self.end_time <= self.start_time:
            raise ValueError('end_time must be after start_time')
        return self


class ProgramUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    day: Optional[EventDay] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    speaker_id: Optional[int] = Field(None, gt=0, le=MAX_ID)

    @field_validator('title')
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class ProgramSummary(IDSchema):
    title: str
    day: EventDay
    start_time: time
    end_time: time


class ProgramResponse(IDSchema, TimestampSchema):
    title: str
    day: EventDay
    start_time: time
    end_time: time
    speaker_id: Optional[int] = None
    speaker: Optional[SpeakerResponse] = None


class SpeakerDetail(SpeakerResponse):
    programs: List[ProgramSummary] = []
