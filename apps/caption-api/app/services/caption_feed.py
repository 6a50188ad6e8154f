"""
Read-side queries for the caption list and the caller's recent votes.
"""

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.models.caption import Caption
from app.models.caption_vote import CaptionVote


def list_public_captions(db: Session, limit: int = 12) -> list[dict]:
    """
    Newest public captions with their like count (number of +1 votes).
    """
    like_count = func.coalesce(
        func.sum(case((CaptionVote.vote_value == 1, 1), else_=0)), 0
    ).label("like_count")
    stmt = (
        select(Caption, like_count)
        .outerjoin(CaptionVote, CaptionVote.caption_id == Caption.id)
        .where(Caption.is_public.is_(True))
        .group_by(Caption.id)
        .order_by(Caption.created_datetime_utc.desc())
        .limit(limit)
    )
    rows = db.execute(stmt).all()
    return [
        {
            "id": caption.id,
            "content": caption.content or "",
            "image_id": caption.image_id,
            "like_count": int(likes or 0),
            "created_datetime_utc": caption.created_datetime_utc,
        }
        for caption, likes in rows
    ]


def list_recent_votes(db: Session, voter_id: str, limit: int = 8) -> list[CaptionVote]:
    stmt = (
        select(CaptionVote)
        .where(CaptionVote.profile_id == voter_id)
        .order_by(CaptionVote.created_datetime_utc.desc(), CaptionVote.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())
