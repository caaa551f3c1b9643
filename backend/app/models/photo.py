from __future__ import annotations
import enum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, SmallInteger, Text, DateTime, ForeignKey, Index, func
from app.db import Base
from app.models.profile import Profile
from app.models.activity import Activity


class PhotoStatus(enum.IntEnum):
    # stored as the raw integers the upload flow writes
    AWAITING_REVIEW = 0
    APPROVED = 1
    DENIED = 2


class Photo(Base):
    __tablename__ = "user_activity_photos"

    photo_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    photo_url: Mapped[str] = mapped_column(Text(), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    status: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=PhotoStatus.AWAITING_REVIEW)
    reason: Mapped[str | None] = mapped_column(Text(), nullable=True)  # meaningful only while DENIED

    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    activity_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("activities.id", ondelete="SET NULL"), index=True, nullable=True
    )
    user_activity_id: Mapped[int] = mapped_column(Integer, nullable=False)

    profile: Mapped[Profile | None] = relationship(lazy="raise")
    activity: Mapped[Activity | None] = relationship(lazy="raise")

    __table_args__ = (
        Index("ix_user_activity_photos_status_uploaded_at", "status", "uploaded_at"),
    )
