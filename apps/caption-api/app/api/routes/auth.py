"""
Session routes:
- GET /auth/me

Sign-in and sign-out belong to the external identity provider; this API
only reports who the bearer token belongs to.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_credential
from app.schemas.auth import SessionOut
from app.services.credentials import Credential

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=SessionOut)
def me(credential: Credential = Depends(get_current_credential)):
    return SessionOut(voter_id=credential.voter_id, email=credential.email)
