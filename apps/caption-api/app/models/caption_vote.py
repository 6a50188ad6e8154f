"""
Caption vote model.

One vote per (caption_id, profile_id). The unique constraint is what the
vote reconciler relies on to detect a repeat vote.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.caption import Caption


class CaptionVote(Base):
    __tablename__ = "caption_votes"
    __table_args__ = (
        UniqueConstraint("caption_id", "profile_id", name="uq_caption_votes_caption_profile"),
        CheckConstraint("vote_value IN (-1, 1)", name="value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    caption_id: Mapped[str] = mapped_column(String, ForeignKey("captions.id"), index=True)
    profile_id: Mapped[str] = mapped_column(String, index=True)
    vote_value: Mapped[int] = mapped_column(Integer)

    created_datetime_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    modified_datetime_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    caption: Mapped["Caption"] = relationship("Caption", back_populates="votes")
