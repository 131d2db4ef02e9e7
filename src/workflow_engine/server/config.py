"""Configuration for the REST server."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from workflow_engine.engine.config import EngineSettings


class ServerSettings(EngineSettings):
    """Settings for the REST API process (``workflow-engine serve``)."""

    host: str = Field(default="127.0.0.1", validation_alias="WORKFLOW_ENGINE_HOST")
    port: int = Field(default=8000, ge=1, le=65535, validation_alias="WORKFLOW_ENGINE_PORT")

    # Empty means no CORS middleware at all.
    cors_origins: str = Field(
        default="",
        validation_alias="WORKFLOW_ENGINE_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
