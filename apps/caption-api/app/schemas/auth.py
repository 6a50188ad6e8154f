"""
Pydantic schemas for session endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    voter_id: str = Field(alias="voterId")
    email: Optional[str] = None
