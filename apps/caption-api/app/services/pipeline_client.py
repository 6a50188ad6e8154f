"""
Thin wrapper around the remote captioning API and the presigned storage
target.

Every call returns an `UpstreamResponse`; interpreting it is up to the
pipeline stages. Transport failures surface as `requests.RequestException`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import requests

from app.core.config import PipelineConfig


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int | None
    body: Any = None
    text: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


def parse_json_body(response: requests.Response) -> Any | None:
    """Parsed JSON body, or None when the body is empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def read_text_body(response: requests.Response) -> str | None:
    """Best-effort diagnostic text; None when nothing readable came back."""
    try:
        text = response.text
    except (UnicodeDecodeError, LookupError, requests.RequestException):
        return None
    return text or None


class PipelineClient(Protocol):
    def generate_presigned_url(self, token: str, content_type: str) -> UpstreamResponse:
        ...

    def upload_bytes(self, presigned_url: str, payload: bytes, content_type: str) -> UpstreamResponse:
        ...

    def register_image(self, token: str, image_url: str, is_common_use: bool = False) -> UpstreamResponse:
        ...

    def generate_captions(self, token: str, image_id: str) -> UpstreamResponse:
        ...


class CaptionPipelineClient:
    def __init__(self, config: PipelineConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def _post_json(self, path: str, token: str, payload: dict[str, Any]) -> UpstreamResponse:
        resp = self.session.post(
            f"{self.config.api_base_url}{path}",
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.config.timeout_seconds,
        )
        return UpstreamResponse(status_code=resp.status_code, body=parse_json_body(resp))

    def generate_presigned_url(self, token: str, content_type: str) -> UpstreamResponse:
        return self._post_json(
            "/pipeline/generate-presigned-url", token, {"contentType": content_type}
        )

    def upload_bytes(self, presigned_url: str, payload: bytes, content_type: str) -> UpstreamResponse:
        # The presigned URL carries its own authorization; no bearer header here.
        resp = self.session.put(
            presigned_url,
            data=payload,
            headers={"Content-Type": content_type},
            timeout=self.config.timeout_seconds,
        )
        text = None if resp.ok else read_text_body(resp)
        return UpstreamResponse(status_code=resp.status_code, text=text)

    def register_image(self, token: str, image_url: str, is_common_use: bool = False) -> UpstreamResponse:
        return self._post_json(
            "/pipeline/upload-image-from-url",
            token,
            {"imageUrl": image_url, "isCommonUse": is_common_use},
        )

    def generate_captions(self, token: str, image_id: str) -> UpstreamResponse:
        return self._post_json("/pipeline/generate-captions", token, {"imageId": image_id})
