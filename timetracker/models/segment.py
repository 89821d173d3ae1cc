from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from timetracker.models.base import Base


class TimeSegment(Base):
    __tablename__ = "time_segments"

    # Autoincrement id doubles as the per-date creation order
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False)  # YYYY-MM-DD, local
    seg_start: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    seg_end: Mapped[str | None] = mapped_column(String(5))  # NULL while open
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_time_segments_date", "date"),
    )

    @property
    def is_open(self) -> bool:
        return self.seg_end is None
