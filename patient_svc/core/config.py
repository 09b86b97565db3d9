"""
Configuration module for Patient Service API.
Uses Pydantic BaseSettings for validation - app fails fast on invalid config.
"""
import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Values come from the environment or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    patient_svc_db_dir: str = Field(default="data", description="Database directory")
    patient_svc_db_file: str = Field(default="patients.db", description="Database filename")
    patient_svc_db_busy_timeout: int = Field(default=5000, ge=0, description="SQLite busy timeout in milliseconds")

    # API Configuration
    patient_svc_host: str = Field(default="0.0.0.0", description="API host")
    patient_svc_port: int = Field(default=8080, description="API port")
    patient_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Cross-origin access is granted to exactly one frontend origin
    patient_svc_cors_origin: str = Field(
        default="http://localhost:5173",
        description="Origin allowed to make cross-origin requests",
    )

    # Logging Configuration
    patient_svc_log_level: str = Field(default="INFO", description="Root log level")
    patient_svc_log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("patient_svc_cors_origin")
    @classmethod
    def validate_cors_origin(cls, value: str) -> str:
        """Reject wildcard or scheme-less origins."""
        value = value.strip().rstrip("/")
        if value == "*":
            raise ValueError("PATIENT_SVC_CORS_ORIGIN must name a single origin, not '*'")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"PATIENT_SVC_CORS_ORIGIN must include a scheme: '{value}'")
        return value

    @field_validator("patient_svc_log_format")
    @classmethod
    def validate_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError(f"PATIENT_SVC_LOG_FORMAT must be 'json' or 'text', got '{value}'")
        return value

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.patient_svc_db_dir) / self.patient_svc_db_file)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.patient_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if config is invalid
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

# Module-level exports for existing code
DATABASE_DIR = settings.patient_svc_db_dir
DATABASE_FILE = settings.patient_svc_db_file
DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.patient_svc_db_busy_timeout

API_HOST = settings.patient_svc_host
API_PORT = settings.patient_svc_port
API_RELOAD = settings.patient_svc_reload

CORS_ORIGIN = settings.patient_svc_cors_origin

LOG_LEVEL = settings.patient_svc_log_level
LOG_FORMAT = settings.patient_svc_log_format
