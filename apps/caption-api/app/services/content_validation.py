"""
Upload validation.

Runs before any network call: a rejected upload never reaches the
credential lookup or the captioning pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.core.config import PipelineConfig


class RejectionReason(str, Enum):
    MISSING_FILE = "missing-file"
    UNSUPPORTED_TYPE = "unsupported-type"
    EMPTY_FILE = "empty-file"


@dataclass(frozen=True)
class UploadRequest:
    payload: bytes
    content_type: str
    byte_length: int


@dataclass(frozen=True)
class Accepted:
    request: UploadRequest


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    message: str
    supported_content_types: list[str] | None = None


def validate_upload(
    payload: bytes | None,
    content_type: str | None,
    byte_length: int | None,
    config: PipelineConfig,
) -> Accepted | Rejected:
    """
    Check an upload in order: presence, content type, size.
    The first failing rule decides the rejection.
    """
    if payload is None:
        return Rejected(
            RejectionReason.MISSING_FILE,
            'Missing file field. Use multipart form-data with key "file".',
        )

    normalized = (content_type or "").strip().lower()
    if normalized not in config.supported_content_types:
        return Rejected(
            RejectionReason.UNSUPPORTED_TYPE,
            f"Unsupported content type: {normalized or 'unknown'}",
            supported_content_types=config.ordered_content_types(),
        )

    if not byte_length or byte_length <= 0:
        return Rejected(RejectionReason.EMPTY_FILE, "Uploaded file is empty.")

    return Accepted(UploadRequest(payload=bytes(payload), content_type=normalized, byte_length=byte_length))
