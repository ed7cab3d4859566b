"""Poll model."""
from __future__ import annotations

from sqlalchemy import JSON, BigInteger, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from lounge.models.base import Base


class Poll(Base):
    """Poll with ordered options and one overwritable vote per user."""

    __tablename__ = "polls"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    # str(user_id) -> zero-based option index. Reassign the dict to persist changes.
    votes: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)
    closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    creator_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def tally(self) -> list[int]:
        """Vote count per option, in option order."""
        counts = [0] * len(self.options)
        for idx in (self.votes or {}).values():
            if 0 <= idx < len(counts):
                counts[idx] += 1
        return counts
