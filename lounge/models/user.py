"""Lounge user model."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lounge.models.base import Base


class User(Base):
    """A lounge member. The id is supplied by the caller, never generated."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    username: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 0 user, 1 moderator, 2 admin
    banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tripcode: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    joined: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
