"""
Pydantic schemas for captions.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CaptionOut(BaseModel):
    id: str
    content: str = ""
    image_id: Optional[str] = None
    like_count: int = 0
    created_datetime_utc: Optional[datetime] = None
