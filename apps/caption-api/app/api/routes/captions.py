"""
Caption listing:
- GET /captions
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_credential, get_db
from app.core.config import settings
from app.schemas.caption import CaptionOut
from app.services.caption_feed import list_public_captions

router = APIRouter(prefix="/captions", tags=["captions"])


@router.get("", response_model=list[CaptionOut])
def list_captions(
    limit: int | None = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_db),
    credential=Depends(get_current_credential),
):
    rows = list_public_captions(db, limit or settings.PUBLIC_CAPTIONS_LIMIT)
    return [CaptionOut(**row) for row in rows]
