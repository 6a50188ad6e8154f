"""
Vote persistence on top of the `caption_votes` table.

The store never checks for an existing row before inserting; callers
learn about a repeat vote from `UniqueViolationError`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.caption_vote import CaptionVote

UNIQUE_VIOLATION_SQLSTATE = "23505"


class VoteStoreError(Exception):
    """A vote write failed."""


class UniqueViolationError(VoteStoreError):
    """The insert collided with an existing (caption_id, profile_id) row."""


class VoteStore(Protocol):
    def insert(self, caption_id: str, voter_id: str, value: int, now: datetime) -> None:
        ...

    def update(self, caption_id: str, voter_id: str, value: int, now: datetime) -> int:
        ...


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_SQLSTATE
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


class SqlAlchemyVoteStore:
    def __init__(self, db: Session):
        self.db = db

    def insert(self, caption_id: str, voter_id: str, value: int, now: datetime) -> None:
        self.db.add(
            CaptionVote(
                caption_id=caption_id,
                profile_id=voter_id,
                vote_value=value,
                created_datetime_utc=now,
                modified_datetime_utc=now,
            )
        )
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                raise UniqueViolationError(str(exc.orig)) from exc
            raise VoteStoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise VoteStoreError(str(exc)) from exc

    def update(self, caption_id: str, voter_id: str, value: int, now: datetime) -> int:
        stmt = (
            update(CaptionVote)
            .where(
                CaptionVote.caption_id == caption_id,
                CaptionVote.profile_id == voter_id,
            )
            .values(vote_value=value, modified_datetime_utc=now)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise VoteStoreError(str(exc)) from exc
        return result.rowcount

    def get(self, caption_id: str, voter_id: str) -> CaptionVote | None:
        stmt = select(CaptionVote).where(
            CaptionVote.caption_id == caption_id,
            CaptionVote.profile_id == voter_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()
