"""
Pydantic schemas for the caption pipeline endpoint.

Field names follow the camelCase envelope the frontend already consumes.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class PipelineSuccessOut(BaseModel):
    imageId: str
    cdnUrl: str
    captions: List[Any] = Field(default_factory=list)


class PipelineFailureOut(BaseModel):
    step: str
    error: str
    details: Any = None


class PipelineErrorOut(BaseModel):
    error: str
    reason: Optional[str] = None
    supportedContentTypes: Optional[List[str]] = None


class PipelineStepOut(BaseModel):
    id: int
    name: str
    label: str
