"""
SQLAlchemy table models.

Timestamps are stored as naive UTC; conversion to aware datetimes happens in
the store layer.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ReviewRecordRow(Base):
    """Scheduling state for one learned item."""

    __tablename__ = "review_records"

    item_id: Mapped[str] = mapped_column(Text, primary_key=True)
    mastery_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_reviewed_at: Mapped[datetime | None] = mapped_column(DateTime)
    next_due_at: Mapped[datetime | None] = mapped_column(DateTime)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime | None] = mapped_column(DateTime)

    __table_args__ = (Index("idx_review_records_next_due", "next_due_at"),)


class AppSetting(Base):
    """Key-value application setting (notification preferences)."""

    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime)
