"""
Vote reconciliation.

Insert first; on a uniqueness conflict fall back to exactly one update
scoped to the same (caption, voter) pair. At most two writes per call.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from app.services.vote_store import UniqueViolationError, VoteStore, VoteStoreError

logger = logging.getLogger(__name__)

ALLOWED_VOTE_VALUES = (-1, 1)


class VoteOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    INVALID = "invalid"
    ERROR = "error"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_vote_value(value: Any) -> bool:
    # bool is an int subclass; True must not count as +1
    return type(value) is int and value in ALLOWED_VOTE_VALUES


def submit_vote(
    store: VoteStore,
    caption_id: str | None,
    voter_id: str,
    value: Any,
    clock: Callable[[], datetime] = utcnow,
) -> VoteOutcome:
    caption_id = (caption_id or "").strip()
    if not caption_id or not is_valid_vote_value(value):
        return VoteOutcome.INVALID

    try:
        store.insert(caption_id, voter_id, value, clock())
    except UniqueViolationError:
        logger.debug("Vote exists for caption %s by %s; updating", caption_id, voter_id)
    except VoteStoreError as exc:
        logger.error("Failed to insert vote for caption %s: %s", caption_id, exc)
        return VoteOutcome.ERROR
    else:
        return VoteOutcome.CREATED

    try:
        matched = store.update(caption_id, voter_id, value, clock())
    except VoteStoreError as exc:
        logger.error("Failed to update vote for caption %s: %s", caption_id, exc)
        return VoteOutcome.ERROR

    if not matched:
        # Row vanished between the conflicting insert and the update.
        logger.error("Vote update for caption %s by %s matched no rows", caption_id, voter_id)
        return VoteOutcome.ERROR
    return VoteOutcome.UPDATED


def parse_form_vote_value(raw: Any) -> Any:
    """
    Form posts carry the vote as text. Returns an int for integer text,
    otherwise the raw value so validation rejects it.
    """
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return raw
    return raw
