from app.api.routes.auth import router as auth_router
from app.api.routes.captions import router as captions_router
from app.api.routes.pipeline import router as pipeline_router
from app.api.routes.votes import router as votes_router

__all__ = [
    "auth_router",
    "captions_router",
    "pipeline_router",
    "votes_router",
]
