"""
Program (schedule session) model
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
from app.models.reservation import event_day_type


class Program(BaseModel):
    """
    Session in the event schedule
    """
    __tablename__ = "programs"
    __table_args__ = (
        CheckConstraint('end_time > start_time', name='chk_programs_time_range'),
    )

    title = Column(String(255), nullable=False)
    day = Column(
        event_day_type,
        nullable=False,
        index=True
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    speaker_id = Column(
        Integer,
        ForeignKey("speakers.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Relationships
    speaker = relationship("Speaker", back_populates="programs")

    def __repr__(self):
        return f"<Program(id={self.id}, title={self.title}, day={self.day}, start={self.start_time})>"
