"""
Configuration Schemas for SlideCreator.

Security:
    Sensitive fields use SecretStr to prevent accidental logging
    of credentials. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class AppSettings(BaseModel):
    """
    Application settings model.

    Built from SLIDECREATOR_* environment variables by
    `slidecreator.app.dependencies.get_settings()`.
    """

    model_config = ConfigDict(extra="ignore")

    # Service identity
    service_name: str = "slidecreator"
    environment: str = "development"
    debug: bool = False

    # Storage
    storage_backend: Literal["mongo", "memory"] = "mongo"
    mongodb_url: SecretStr = Field(
        default=SecretStr("mongodb://localhost:27017"),
        description="MongoDB connection URL",
    )
    mongodb_database: str = "slidecreator"

    # Generation service
    openai_api_key: SecretStr | None = None
    generation_model: str = Field(default="gpt-4o", description="Chat-completion model")
    generation_temperature: float = Field(default=0.7, ge=0, le=2)

    # Templating
    format_cache_ttl: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before the output-format cache is reloaded",
    )
