"""
Pydantic schemas for caption votes.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class VoteIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped so a bad value becomes an `invalid` outcome, not a 422.
    vote_value: Any = Field(default=None, alias="voteValue")


class VoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["created", "updated", "invalid", "error"]
    caption_id: str = Field(alias="captionId")


class RecentVoteOut(BaseModel):
    id: int
    caption_id: str
    vote_value: int
    created_datetime_utc: datetime
    modified_datetime_utc: datetime
