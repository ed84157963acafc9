"""
Base model class with common fields
"""

from sqlalchemy import Column, DateTime, Integer, func

from app.core.database import Base


class BaseModel(Base):
    """
    Abstract base: integer primary key plus database-side timestamps
    """
    __abstract__ = True

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
