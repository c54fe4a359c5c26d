"""
Goal model.
"""

from sqlalchemy import Column, DateTime, Integer, Float

from app.models.base import Base
from app.shared.dates import utcnow


class Goal(Base):
    """Target distance (km) to cover between start_date and end_date."""

    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    target_distance = Column(Float, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Goal {self.id} {self.target_distance}km>"
