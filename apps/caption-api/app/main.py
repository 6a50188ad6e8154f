"""
FastAPI application entrypoint.

Responsibilities:
- Configure logging and create DB tables on startup for easy local dev.
- Configure CORS to the frontend origin only.
- Register routers.
- Turn any unhandled exception into a generic 500 without leaking details.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import engine
from app.db.base import Base
from app.api.routes import (
    auth_router,
    captions_router,
    pipeline_router,
    votes_router,
)
from app import models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)

app = FastAPI(title="Caption Pipeline API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    setup_logging(settings.LOG_LEVEL)
    # For local dev we auto-create tables; the hosted store owns its schema.
    Base.metadata.create_all(bind=engine)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(auth_router)
app.include_router(captions_router)
app.include_router(pipeline_router)
app.include_router(votes_router)


@app.get("/health")
def health():
    return {"ok": True}
