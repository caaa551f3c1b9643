from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DateTime, func
from app.db import Base


class Profile(Base):
    """Child profile. Owned by the mobile app; read-only here."""
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    nickname: Mapped[str | None] = mapped_column(String(120), nullable=True)
    colour: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    team: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)  # owning account (auth uid)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
