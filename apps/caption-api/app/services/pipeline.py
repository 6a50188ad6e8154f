"""
Caption pipeline orchestrator.

Four remote stages run in order, each one feeding the next:

1. generate-presigned-url        -> presigned upload URL + CDN URL
2. upload-bytes-to-presigned-url -> raw bytes written to storage
3. register-image-url            -> image id for the CDN URL
4. generate-captions             -> list of caption records

A stage is a plain function `(context, client) -> context | StageFailure`.
The orchestrator folds over `PIPELINE_STAGES` and stops at the first
failure. Nothing is retried: the byte upload has side effects and the
other stages are billable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

import requests

from app.core.config import PipelineConfig
from app.services.content_validation import UploadRequest
from app.services.credentials import Credential
from app.services.pipeline_client import PipelineClient

logger = logging.getLogger(__name__)

STAGE_PRESIGN = "generate-presigned-url"
STAGE_UPLOAD = "upload-bytes-to-presigned-url"
STAGE_REGISTER = "register-image-url"
STAGE_CAPTIONS = "generate-captions"

MIN_ERROR_STATUS = 400
MAX_ERROR_STATUS = 599


@dataclass(frozen=True)
class PipelineContext:
    token: str
    payload: bytes
    content_type: str
    presigned_url: str | None = None
    cdn_url: str | None = None
    image_id: str | None = None
    captions: list[Any] | None = None


@dataclass(frozen=True)
class StageFailure:
    stage: str
    status_code: int | None
    details: Any = None


@dataclass(frozen=True)
class PipelineSuccess:
    image_id: str
    cdn_url: str
    captions: list[Any] = field(default_factory=list)


StageResult = PipelineContext | StageFailure


@dataclass(frozen=True)
class Stage:
    name: str
    label: str
    error_message: str
    run: Callable[[PipelineContext, PipelineClient], StageResult]


def safe_status(status: int | None, fallback: int = 502) -> int:
    """Upstream status if it is a 4xx/5xx code, otherwise the fallback."""
    if isinstance(status, int) and not isinstance(status, bool):
        if MIN_ERROR_STATUS <= status <= MAX_ERROR_STATUS:
            return status
    return fallback


def _field(body: Any, key: str) -> Any:
    if isinstance(body, dict):
        return body.get(key)
    return None


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def presign_stage(ctx: PipelineContext, client: PipelineClient) -> StageResult:
    resp = client.generate_presigned_url(ctx.token, ctx.content_type)
    presigned_url = _field(resp.body, "presignedUrl")
    cdn_url = _field(resp.body, "cdnUrl")
    if not resp.ok or not _non_empty_str(presigned_url) or not _non_empty_str(cdn_url):
        return StageFailure(STAGE_PRESIGN, resp.status_code, resp.body)
    return replace(ctx, presigned_url=presigned_url, cdn_url=cdn_url)


def upload_stage(ctx: PipelineContext, client: PipelineClient) -> StageResult:
    resp = client.upload_bytes(ctx.presigned_url, ctx.payload, ctx.content_type)
    if not resp.ok:
        return StageFailure(STAGE_UPLOAD, resp.status_code, resp.text or None)
    return ctx


def register_stage(ctx: PipelineContext, client: PipelineClient) -> StageResult:
    resp = client.register_image(ctx.token, ctx.cdn_url, is_common_use=False)
    image_id = _field(resp.body, "imageId")
    if not resp.ok or not _non_empty_str(image_id):
        return StageFailure(STAGE_REGISTER, resp.status_code, resp.body)
    return replace(ctx, image_id=image_id)


def captions_stage(ctx: PipelineContext, client: PipelineClient) -> StageResult:
    resp = client.generate_captions(ctx.token, ctx.image_id)
    if not resp.ok or not isinstance(resp.body, list):
        return StageFailure(STAGE_CAPTIONS, resp.status_code, resp.body)
    return replace(ctx, captions=resp.body)


PIPELINE_STAGES: tuple[Stage, ...] = (
    Stage(
        STAGE_PRESIGN,
        "Generate presigned URL",
        "Failed to generate presigned upload URL.",
        presign_stage,
    ),
    Stage(
        STAGE_UPLOAD,
        "Upload image bytes",
        "Failed to upload image bytes to storage.",
        upload_stage,
    ),
    Stage(
        STAGE_REGISTER,
        "Register image in pipeline",
        "Failed to register image URL in pipeline.",
        register_stage,
    ),
    Stage(
        STAGE_CAPTIONS,
        "Generate captions",
        "Failed to generate captions.",
        captions_stage,
    ),
)

STAGE_ERROR_MESSAGES = {stage.name: stage.error_message for stage in PIPELINE_STAGES}


def stage_error_message(stage_name: str) -> str:
    return STAGE_ERROR_MESSAGES.get(stage_name, "Caption pipeline step failed.")


class PipelineOrchestrator:
    def __init__(
        self,
        client: PipelineClient,
        config: PipelineConfig,
        stages: tuple[Stage, ...] = PIPELINE_STAGES,
    ):
        self.client = client
        self.config = config
        self.stages = stages

    def run(self, request: UploadRequest, credential: Credential) -> PipelineSuccess | StageFailure:
        ctx = PipelineContext(
            token=credential.token,
            payload=request.payload,
            content_type=request.content_type,
        )

        for stage in self.stages:
            try:
                result = stage.run(ctx, self.client)
            except requests.RequestException as exc:
                logger.warning("Pipeline stage %s transport failure: %s", stage.name, exc)
                return StageFailure(stage.name, self.config.fallback_status, None)

            if isinstance(result, StageFailure):
                failure = replace(
                    result,
                    status_code=safe_status(result.status_code, self.config.fallback_status),
                )
                logger.warning(
                    "Pipeline stage %s failed with status %s (upstream %s)",
                    failure.stage,
                    failure.status_code,
                    result.status_code,
                )
                return failure
            ctx = result
            logger.debug("Pipeline stage %s succeeded", stage.name)

        return PipelineSuccess(
            image_id=ctx.image_id,
            cdn_url=ctx.cdn_url,
            captions=ctx.captions if ctx.captions is not None else [],
        )
