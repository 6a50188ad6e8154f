"""
Caption model.

Rows are written by the remote captioning service; this API reads them
and lets signed-in users vote on them.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.caption_vote import CaptionVote


class Caption(Base):
    __tablename__ = "captions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    image_id: Mapped[str | None] = mapped_column(String, index=True, nullable=True)
    content: Mapped[str] = mapped_column(String, default="")
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)
    profile_id: Mapped[str | None] = mapped_column(String, nullable=True)

    votes: Mapped[List["CaptionVote"]] = relationship(
        "CaptionVote", back_populates="caption", cascade="all, delete-orphan"
    )

    created_datetime_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
