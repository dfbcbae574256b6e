"""
Application configuration management.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        APP_NAME: Service name reported by the health endpoints
        APP_VERSION: Service version
        TAX_YEAR: Tax year the bundled tables describe
        MAX_FILE_SIZE: Maximum size of a single uploaded document in bytes
        MAX_UPLOAD_FILES: Maximum number of documents per request
        CORS_ORIGINS: Origins allowed to call the API from a browser
        HOST: Interface uvicorn binds to
        PORT: Port uvicorn listens on
        LOG_LEVEL: Root log level
        ENABLE_AUDIT_LOGGING: Write structured audit events to Cloud Logging
        PROJECT_ID: GCP project identifier used for audit logging
        AUDIT_LOG_NAME: Cloud Logging log name for audit events
    """
    APP_NAME: str = "tax-estimator-api"
    APP_VERSION: str = "0.1.0"
    TAX_YEAR: int = 2024
    MAX_FILE_SIZE: int = 10 * 1024 * 1024
    MAX_UPLOAD_FILES: int = 10
    CORS_ORIGINS: List[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    ENABLE_AUDIT_LOGGING: bool = False
    PROJECT_ID: Optional[str] = None
    AUDIT_LOG_NAME: str = "tax-estimator-audit"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


# Global settings instance
settings = Settings()
