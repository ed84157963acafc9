"""
Base Pydantic schemas
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
    )


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields"""
    created_at: datetime
    updated_at: Optional[datetime] = None


# Upper bound of the integer primary key columns
MAX_ID = 2_147_483_647


class IDSchema(BaseSchema):
    """Schema with ID field"""
    id: int
