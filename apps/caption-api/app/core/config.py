"""
Central configuration for the FastAPI backend.

Loads environment variables via Pydantic Settings.
The captioning API address and the accepted upload types are
immutable configuration handed to the pipeline at construction time.
"""

from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SUPPORTED_CONTENT_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/heic",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./captions.db"

    # Shared secret of the identity provider that issues session JWTs.
    JWT_SECRET: str = "change-me-in-env"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str | None = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120

    PIPELINE_API_BASE_URL: str = "https://api.almostcrackd.ai"
    PIPELINE_TIMEOUT_SECONDS: float = 60.0
    SUPPORTED_CONTENT_TYPES: list[str] = list(DEFAULT_SUPPORTED_CONTENT_TYPES)
    FALLBACK_ERROR_STATUS: int = 502

    PUBLIC_CAPTIONS_LIMIT: int = 12
    RECENT_VOTES_LIMIT: int = 8

    # Used for CORS; locked to localhost by default
    FRONTEND_ORIGIN: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"


settings = Settings()


@dataclass(frozen=True)
class PipelineConfig:
    api_base_url: str
    supported_content_types: frozenset[str]
    fallback_status: int = 502
    timeout_seconds: float = 60.0

    def ordered_content_types(self) -> list[str]:
        """Supported types in a stable order for error payloads."""
        known = [t for t in DEFAULT_SUPPORTED_CONTENT_TYPES if t in self.supported_content_types]
        extra = sorted(self.supported_content_types.difference(known))
        return known + extra


def pipeline_config_from_settings(source: Settings = settings) -> PipelineConfig:
    return PipelineConfig(
        api_base_url=source.PIPELINE_API_BASE_URL.rstrip("/"),
        supported_content_types=frozenset(t.lower() for t in source.SUPPORTED_CONTENT_TYPES),
        fallback_status=source.FALLBACK_ERROR_STATUS,
        timeout_seconds=source.PIPELINE_TIMEOUT_SECONDS,
    )
