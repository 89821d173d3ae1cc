from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from timetracker.models.base import Base


class DayMarker(Base):
    """A day that was explicitly ended with Stop."""

    __tablename__ = "day_markers"

    date: Mapped[str] = mapped_column(String(10), primary_key=True)
    ended_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
