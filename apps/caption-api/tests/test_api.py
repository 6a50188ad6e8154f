import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_db, get_pipeline_config, get_pipeline_orchestrator
from app.core.security import create_access_token
from app.main import app
from app.models.caption_vote import CaptionVote
from app.services.pipeline import PipelineOrchestrator
from app.services.pipeline_client import UpstreamResponse

from fakes import CAPTIONS, CDN_URL, IMAGE_ID, FakePipelineClient


def _auth(voter_id="voter-1"):
    return {"Authorization": f"Bearer {create_access_token({'sub': voter_id})}"}


@pytest.fixture
def client(session_factory, pipeline_config, fake_client):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pipeline_config] = lambda: pipeline_config
    app.dependency_overrides[get_pipeline_orchestrator] = lambda: PipelineOrchestrator(
        fake_client, pipeline_config
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_pipeline_success(client, fake_client) -> None:
    resp = client.post(
        "/api/pipeline/captions",
        files={"file": ("cat.jpg", b"\xff\xd8" * 25_600, "image/jpeg")},
        headers=_auth(),
    )

    assert resp.status_code == 200
    assert resp.json() == {"imageId": IMAGE_ID, "cdnUrl": CDN_URL, "captions": CAPTIONS}
    assert fake_client.call_count == 4


def test_pipeline_rejects_pdf_before_auth(client, fake_client) -> None:
    resp = client.post(
        "/api/pipeline/captions",
        files={"file": ("doc.pdf", b"%PDF-1.7", "application/pdf")},
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Unsupported content type: application/pdf"
    assert body["supportedContentTypes"][0] == "image/jpeg"
    assert fake_client.call_count == 0


def test_pipeline_missing_file(client, fake_client) -> None:
    resp = client.post("/api/pipeline/captions", data={"note": "no file"}, headers=_auth())

    assert resp.status_code == 400
    assert resp.json()["reason"] == "missing-file"
    assert fake_client.call_count == 0


def test_pipeline_empty_file(client, fake_client) -> None:
    resp = client.post(
        "/api/pipeline/captions",
        files={"file": ("empty.png", b"", "image/png")},
        headers=_auth(),
    )

    assert resp.status_code == 400
    assert resp.json()["error"] == "Uploaded file is empty."
    assert fake_client.call_count == 0


def test_pipeline_requires_session(client, fake_client) -> None:
    resp = client.post(
        "/api/pipeline/captions",
        files={"file": ("cat.jpg", b"\xff\xd8", "image/jpeg")},
        headers={"Authorization": "Bearer forged"},
    )

    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing valid JWT access token. Please sign in again."}
    assert fake_client.call_count == 0


def test_pipeline_stage_failure(client, fake_client) -> None:
    fake_client.responses["generate-presigned-url"] = UpstreamResponse(403, None)

    resp = client.post(
        "/api/pipeline/captions",
        files={"file": ("cat.jpg", b"\xff\xd8", "image/jpeg")},
        headers=_auth(),
    )

    assert resp.status_code == 403
    assert resp.json() == {
        "step": "generate-presigned-url",
        "error": "Failed to generate presigned upload URL.",
        "details": None,
    }
    assert fake_client.call_count == 1


def test_pipeline_steps(client) -> None:
    steps = client.get("/api/pipeline/steps").json()

    assert [s["name"] for s in steps] == [
        "generate-presigned-url",
        "upload-bytes-to-presigned-url",
        "register-image-url",
        "generate-captions",
    ]
    assert [s["id"] for s in steps] == [1, 2, 3, 4]


def test_vote_created_then_updated(client, seeded_captions, session_factory) -> None:
    first = client.post("/captions/c1/votes", json={"voteValue": 1}, headers=_auth())
    second = client.post("/captions/c1/votes", json={"voteValue": -1}, headers=_auth())

    assert first.status_code == 200
    assert first.json() == {"status": "created", "captionId": "c1"}
    assert second.json() == {"status": "updated", "captionId": "c1"}

    db = session_factory()
    try:
        row = db.query(CaptionVote).filter_by(caption_id="c1", profile_id="voter-1").one()
        assert row.vote_value == -1
    finally:
        db.close()


@pytest.mark.parametrize("value", [0, 2, -5, "1", None, True])
def test_vote_invalid_value(client, seeded_captions, value) -> None:
    resp = client.post("/captions/c1/votes", json={"voteValue": value}, headers=_auth())

    assert resp.status_code == 400
    assert resp.json()["status"] == "invalid"


def test_vote_requires_session(client, seeded_captions) -> None:
    resp = client.post("/captions/c1/votes", json={"voteValue": 1})

    assert resp.status_code == 401


def test_form_vote_redirects_with_outcome(client, seeded_captions) -> None:
    resp = client.post(
        "/votes",
        data={"captionId": "c2", "voteValue": "1", "redirectTo": "/protected"},
        headers=_auth(),
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/protected?vote=created"


def test_form_vote_ignores_external_redirect(client, seeded_captions) -> None:
    resp = client.post(
        "/votes",
        data={"captionId": "c2", "voteValue": "-1", "redirectTo": "https://evil.example.com"},
        headers=_auth(),
        follow_redirects=False,
    )

    assert resp.status_code == 200
    assert resp.json() == {"status": "created", "captionId": "c2"}


def test_form_vote_invalid_value(client, seeded_captions) -> None:
    resp = client.post("/votes", data={"captionId": "c2", "voteValue": "0"}, headers=_auth())

    assert resp.status_code == 400
    assert resp.json()["status"] == "invalid"


def test_list_captions_counts_likes(client, seeded_captions) -> None:
    client.post("/captions/c1/votes", json={"voteValue": 1}, headers=_auth("voter-1"))
    client.post("/captions/c1/votes", json={"voteValue": 1}, headers=_auth("voter-2"))
    client.post("/captions/c1/votes", json={"voteValue": -1}, headers=_auth("voter-3"))

    captions = client.get("/captions", headers=_auth()).json()

    assert [c["id"] for c in captions] == ["c2", "c1"]
    likes = {c["id"]: c["like_count"] for c in captions}
    assert likes == {"c1": 2, "c2": 0}


def test_recent_votes_only_for_caller(client, seeded_captions) -> None:
    client.post("/captions/c1/votes", json={"voteValue": 1}, headers=_auth("voter-1"))
    client.post("/captions/c2/votes", json={"voteValue": -1}, headers=_auth("voter-2"))

    votes = client.get("/votes/recent", headers=_auth("voter-1")).json()

    assert [(v["caption_id"], v["vote_value"]) for v in votes] == [("c1", 1)]


def test_me(client) -> None:
    token = create_access_token({"sub": "voter-9", "email": "nine@example.com"})

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.json() == {"voterId": "voter-9", "email": "nine@example.com"}


@pytest.mark.parametrize("raw", ["²", "①", "-³", "1.0"])
def test_form_vote_non_ascii_digits_are_invalid(client, seeded_captions, session_factory, raw) -> None:
    resp = client.post("/votes", data={"captionId": "c1", "voteValue": raw}, headers=_auth())

    assert resp.status_code == 400
    assert resp.json() == {"status": "invalid", "captionId": "c1"}
    db = session_factory()
    try:
        assert db.query(CaptionVote).count() == 0
    finally:
        db.close()


def test_json_vote_echoes_stored_caption_id(client, seeded_captions, session_factory) -> None:
    resp = client.post("/captions/%20c1%20/votes", json={"voteValue": 1}, headers=_auth())

    assert resp.status_code == 200
    assert resp.json() == {"status": "created", "captionId": "c1"}
    db = session_factory()
    try:
        assert db.query(CaptionVote).one().caption_id == "c1"
    finally:
        db.close()
