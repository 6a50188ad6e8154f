"""
Resolve the caller's session credential from a bearer token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from jose import JWTError

from app.core.security import decode_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    token: str
    voter_id: str
    email: str | None = None


class CredentialResolver(Protocol):
    def resolve(self) -> Credential | None:
        ...


class BearerCredentialResolver:
    """Reads an `Authorization: Bearer <jwt>` header value."""

    def __init__(self, authorization: str | None):
        self.authorization = authorization

    def resolve(self) -> Credential | None:
        header = self.authorization or ""
        if not header.lower().startswith("bearer "):
            return None
        token = header.split(" ", 1)[1].strip()
        if not token:
            return None

        try:
            payload = decode_token(token)
        except JWTError as exc:
            logger.info("Rejected bearer token: %s", exc)
            return None

        voter_id = payload.get("sub")
        if not voter_id or not isinstance(voter_id, str):
            return None
        return Credential(token=token, voter_id=voter_id, email=payload.get("email"))


class StaticCredentialResolver:
    """Resolver with a fixed answer; handy for scripts and tests."""

    def __init__(self, credential: Credential | None):
        self.credential = credential

    def resolve(self) -> Credential | None:
        return self.credential
