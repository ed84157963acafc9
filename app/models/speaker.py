"""
Speaker model
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Speaker(BaseModel):
    """
    Speaker at the event
    """
    __tablename__ = "speakers"

    name = Column(String(255), nullable=False, index=True)
    job_title = Column(String(255), nullable=False)
    bio = Column(Text, nullable=False)
    photo_url = Column(String(500), nullable=True)

    # Relationships
    programs = relationship(
        "Program",
        back_populates="speaker",
        passive_deletes=True,
        order_by="[Program.day, Program.start_time]",
    )

    def __repr__(self):
        return f"<Speaker(id={self.id}, name={self.name})>"
