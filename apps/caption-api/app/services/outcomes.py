"""
Turn pipeline results into response envelopes.

`handle_caption_upload` is the single entrypoint used by the route:
validate -> resolve credential -> run pipeline -> compose. Anything that
escapes those steps is logged and reported as a generic 500.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.core.config import PipelineConfig
from app.services.content_validation import Rejected, validate_upload
from app.services.credentials import CredentialResolver
from app.services.pipeline import (
    PipelineOrchestrator,
    PipelineSuccess,
    StageFailure,
    stage_error_message,
)

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_SERVER_ERROR = 500

UNAUTHORIZED_MESSAGE = "Missing valid JWT access token. Please sign in again."
UNEXPECTED_MESSAGE = "Unexpected server error while processing image caption pipeline."


@dataclass(frozen=True)
class ResponseEnvelope:
    status_code: int
    body: dict[str, Any]


def compose_success(result: PipelineSuccess) -> ResponseEnvelope:
    return ResponseEnvelope(
        HTTP_OK,
        {
            "imageId": result.image_id,
            "cdnUrl": result.cdn_url,
            "captions": result.captions,
        },
    )


def compose_failure(result: StageFailure) -> ResponseEnvelope:
    return ResponseEnvelope(
        result.status_code,
        {
            "step": result.stage,
            "error": stage_error_message(result.stage),
            "details": result.details,
        },
    )


def compose_rejection(rejected: Rejected) -> ResponseEnvelope:
    body: dict[str, Any] = {"error": rejected.message, "reason": rejected.reason.value}
    if rejected.supported_content_types is not None:
        body["supportedContentTypes"] = rejected.supported_content_types
    return ResponseEnvelope(HTTP_BAD_REQUEST, body)


def compose_unauthorized() -> ResponseEnvelope:
    return ResponseEnvelope(HTTP_UNAUTHORIZED, {"error": UNAUTHORIZED_MESSAGE})


def compose_unexpected() -> ResponseEnvelope:
    return ResponseEnvelope(HTTP_SERVER_ERROR, {"error": UNEXPECTED_MESSAGE})


def compose_outcome(result: PipelineSuccess | StageFailure) -> ResponseEnvelope:
    if isinstance(result, PipelineSuccess):
        return compose_success(result)
    return compose_failure(result)


def handle_caption_upload(
    payload: bytes | None,
    content_type: str | None,
    byte_length: int | None,
    resolver: CredentialResolver,
    orchestrator: PipelineOrchestrator,
    config: PipelineConfig,
) -> ResponseEnvelope:
    try:
        validation = validate_upload(payload, content_type, byte_length, config)
        if isinstance(validation, Rejected):
            logger.info("Upload rejected: %s", validation.reason.value)
            return compose_rejection(validation)

        credential = resolver.resolve()
        if credential is None:
            return compose_unauthorized()

        result = orchestrator.run(validation.request, credential)
        return compose_outcome(result)
    except Exception:
        logger.exception("Unexpected pipeline route failure")
        return compose_unexpected()
