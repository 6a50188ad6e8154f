import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.config import PipelineConfig, DEFAULT_SUPPORTED_CONTENT_TYPES
from app.db.base import Base
from app.models.caption import Caption

from fakes import FakePipelineClient


@pytest.fixture
def pipeline_config():
    return PipelineConfig(
        api_base_url="https://api.example.com",
        supported_content_types=frozenset(DEFAULT_SUPPORTED_CONTENT_TYPES),
        fallback_status=502,
        timeout_seconds=5,
    )


@pytest.fixture
def fake_client():
    return FakePipelineClient()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def seeded_captions(db_session):
    now = datetime.now(timezone.utc)
    rows = [
        Caption(id="c1", image_id="img-1", content="First caption", is_public=True,
                created_datetime_utc=now - timedelta(minutes=2)),
        Caption(id="c2", image_id="img-1", content="Second caption", is_public=True,
                created_datetime_utc=now - timedelta(minutes=1)),
        Caption(id="c3", image_id="img-2", content="Hidden caption", is_public=False,
                created_datetime_utc=now),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows
