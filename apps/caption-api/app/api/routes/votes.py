"""
Vote routes:
- POST /captions/{caption_id}/votes   JSON body {"voteValue": 1 | -1}
- POST /votes                         form post (captionId, voteValue[, redirectTo])
- GET  /votes/recent

The outcome is always one of created|updated|invalid|error.
"""

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.api.deps import get_current_credential, get_db, get_vote_store
from app.core.config import settings
from app.schemas.vote import RecentVoteOut, VoteIn, VoteOut
from app.services.caption_feed import list_recent_votes
from app.services.credentials import Credential
from app.services.vote_store import SqlAlchemyVoteStore
from app.services.votes import VoteOutcome, parse_form_vote_value, submit_vote

router = APIRouter(tags=["votes"])

OUTCOME_STATUS = {
    VoteOutcome.CREATED: 200,
    VoteOutcome.UPDATED: 200,
    VoteOutcome.INVALID: 400,
    VoteOutcome.ERROR: 500,
}


def _outcome_response(outcome: VoteOutcome, caption_id: str) -> JSONResponse:
    body = VoteOut(status=outcome.value, caption_id=caption_id)
    return JSONResponse(
        status_code=OUTCOME_STATUS[outcome],
        content=body.model_dump(by_alias=True),
    )


def _is_local_path(target: str) -> bool:
    return target.startswith("/") and not target.startswith(("//", "/\\"))


@router.post("/captions/{caption_id}/votes", response_model=VoteOut)
def vote_on_caption(
    caption_id: str,
    payload: VoteIn,
    credential: Credential = Depends(get_current_credential),
    store: SqlAlchemyVoteStore = Depends(get_vote_store),
):
    caption_id = caption_id.strip()
    outcome = submit_vote(store, caption_id, credential.voter_id, payload.vote_value)
    return _outcome_response(outcome, caption_id)


@router.post("/votes", response_model=VoteOut)
def vote_from_form(
    caption_id: str = Form(default="", alias="captionId"),
    vote_value: str = Form(default="", alias="voteValue"),
    redirect_to: str | None = Form(default=None, alias="redirectTo"),
    credential: Credential = Depends(get_current_credential),
    store: SqlAlchemyVoteStore = Depends(get_vote_store),
):
    caption_id = caption_id.strip()
    outcome = submit_vote(
        store, caption_id, credential.voter_id, parse_form_vote_value(vote_value)
    )
    if redirect_to and _is_local_path(redirect_to):
        separator = "&" if "?" in redirect_to else "?"
        return RedirectResponse(f"{redirect_to}{separator}vote={outcome.value}", status_code=303)
    return _outcome_response(outcome, caption_id)


@router.get("/votes/recent", response_model=list[RecentVoteOut])
def recent_votes(
    db: Session = Depends(get_db),
    credential: Credential = Depends(get_current_credential),
):
    votes = list_recent_votes(db, credential.voter_id, settings.RECENT_VOTES_LIMIT)
    return [
        RecentVoteOut(
            id=v.id,
            caption_id=v.caption_id,
            vote_value=v.vote_value,
            created_datetime_utc=v.created_datetime_utc,
            modified_datetime_utc=v.modified_datetime_utc,
        )
        for v in votes
    ]
