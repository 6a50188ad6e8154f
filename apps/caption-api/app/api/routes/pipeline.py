"""
Caption pipeline routes:
- POST /api/pipeline/captions
- GET  /api/pipeline/steps

The upload route validates first, then resolves the session, so a bad
upload never triggers a token check or a remote call.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from app.api.deps import (
    get_credential_resolver,
    get_pipeline_config,
    get_pipeline_orchestrator,
)
from app.core.config import PipelineConfig
from app.schemas.pipeline import (
    PipelineErrorOut,
    PipelineFailureOut,
    PipelineStepOut,
    PipelineSuccessOut,
)
from app.services.credentials import CredentialResolver
from app.services.outcomes import handle_caption_upload
from app.services.pipeline import PIPELINE_STAGES, PipelineOrchestrator

router = APIRouter(prefix="/api/pipeline", tags=["pipeline"])


@router.post(
    "/captions",
    response_model=PipelineSuccessOut,
    responses={
        400: {"model": PipelineErrorOut},
        401: {"model": PipelineErrorOut},
        500: {"model": PipelineErrorOut},
        502: {"model": PipelineFailureOut},
    },
)
def run_caption_pipeline(
    file: UploadFile | None = File(default=None),
    resolver: CredentialResolver = Depends(get_credential_resolver),
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
    config: PipelineConfig = Depends(get_pipeline_config),
):
    payload = file.file.read() if file is not None else None
    envelope = handle_caption_upload(
        payload,
        file.content_type if file is not None else None,
        len(payload) if payload is not None else None,
        resolver,
        orchestrator,
        config,
    )
    return JSONResponse(status_code=envelope.status_code, content=envelope.body)


@router.get("/steps", response_model=list[PipelineStepOut])
def list_pipeline_steps():
    return [
        PipelineStepOut(id=index, name=stage.name, label=stage.label)
        for index, stage in enumerate(PIPELINE_STAGES, start=1)
    ]
