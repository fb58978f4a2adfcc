"""Configuration management for the Flashgate API gateway.

This module provides centralized configuration management using Pydantic Settings.
Values are read from environment variables without a prefix, so the names
documented for deployment (``GEMINI_API_KEY``, ``PORT``) apply directly.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (case-insensitive)
2. .env file in the working directory
3. Default values defined in GatewayConfig

Example .env file:
    GEMINI_API_KEY=your-key-here
    PORT=3000
    STAGING_DIR=uploads

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
:func:`flashgate.api.main.create_app` uses it unless the caller passes an
explicit configuration, which is how the test-suite points the staging
directory at a temporary location.

Usage Example
-------------
    from flashgate.core.config import config

    print(config.gemini_model)
    print(config.staging_dir)
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewayConfig(BaseSettings):
    """Main configuration for the Flashgate gateway.

    Attributes
    ----------
    Provider Settings:
        gemini_api_key : str
            Secret for the Gemini API.  An empty key does not stop the
            server from starting; generation requests fail with a 500.
        gemini_model : str
            Model identifier used for every ``generateContent`` call.
        gemini_base_url : str
            Base URL of the Generative Language REST API.
        provider_timeout : float | None
            Seconds before an outbound call is abandoned.  ``None`` leaves
            the call unbounded.

    Server Settings:
        host : str
            Bind address for uvicorn.
        port : int
            Listen port (1-65535).
        log_level : Literal[...]
            Root logging level applied by ``main()``.

    Paths:
        staging_dir : Path
            Directory where uploads are staged for the duration of one
            request.  Also served read-only at ``/uploads``.

    Notes
    -----
    - The staging directory is created automatically if it doesn't exist
    - To modify config, set environment variables and restart the server
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider settings
    gemini_api_key: str = Field(
        default="",
        description="API key for the Gemini generative language service",
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model used for all generation requests",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Generative Language REST API",
    )
    provider_timeout: float | None = Field(
        default=None,
        description="Outbound request timeout in seconds (None = no timeout)",
        gt=0,
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    port: int = Field(
        default=3000,
        description="Server port",
        ge=1,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logging level",
    )

    # Paths
    staging_dir: Path = Field(
        default=Path("uploads"),
        description="Directory for transient upload staging",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    def __init__(self, **kwargs):
        """Initialize configuration and create the staging directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.staging_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loads values from environment variables and the .env file at import time.
config = GatewayConfig()
