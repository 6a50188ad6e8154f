"""
Shared FastAPI dependencies:
- DB session
- Credential resolver and current credential from the bearer JWT
- Pipeline config, client and orchestrator
"""

from fastapi import Depends, HTTPException, Header
from sqlalchemy.orm import Session

from app.core.config import PipelineConfig, pipeline_config_from_settings
from app.db.session import SessionLocal
from app.services.credentials import BearerCredentialResolver, Credential, CredentialResolver
from app.services.pipeline import PipelineOrchestrator
from app.services.pipeline_client import CaptionPipelineClient
from app.services.vote_store import SqlAlchemyVoteStore

_pipeline_config = pipeline_config_from_settings()


def get_db():
    """Yield a SQLAlchemy session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_credential_resolver(
    authorization: str | None = Header(default=None),
) -> CredentialResolver:
    return BearerCredentialResolver(authorization)


def get_current_credential(
    resolver: CredentialResolver = Depends(get_credential_resolver),
) -> Credential:
    """
    Resolve the session credential.
    Raises 401 if missing/invalid.
    """
    credential = resolver.resolve()
    if credential is None:
        raise HTTPException(status_code=401, detail="Missing or invalid bearer token")
    return credential


def get_pipeline_config() -> PipelineConfig:
    return _pipeline_config


def get_pipeline_orchestrator(
    config: PipelineConfig = Depends(get_pipeline_config),
):
    """Yield an orchestrator whose HTTP session lives for one request."""
    client = CaptionPipelineClient(config)
    try:
        yield PipelineOrchestrator(client, config)
    finally:
        client.close()


def get_vote_store(db: Session = Depends(get_db)) -> SqlAlchemyVoteStore:
    return SqlAlchemyVoteStore(db)
