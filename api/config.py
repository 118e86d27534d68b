"""
ProposalGen Configuration

Centralized configuration management using environment variables.
All configuration values are loaded from environment variables with sensible defaults.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "proposal_template.docx"
PLACES_AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"


class Settings:
    """
    Application settings loaded from environment variables.

    Usage:
        from api.config import get_settings
        settings = get_settings()
        print(settings.template_path)
    """

    def __init__(self):
        # Environment
        self.environment = os.environ.get("PROPOSALGEN_ENV", "development")
        self.debug = self.environment != "production"

        self.api_version = "1.0.0"

        # Server
        self.host = os.environ.get("HOST", "0.0.0.0")
        self.port = int(os.environ.get("PORT", "3000"))

        # Database
        self.database_url = self._get_database_url()
        self.db_echo = os.environ.get("DB_ECHO", "false").lower() == "true"

        # CORS
        cors_origins = os.environ.get("CORS_ORIGINS", "*")
        if cors_origins == "*":
            self.cors_origins: List[str] = ["*"]
            self.cors_allow_credentials = False
        else:
            self.cors_origins = [origin.strip() for origin in cors_origins.split(",")]
            self.cors_allow_credentials = True

        # File Upload
        self.max_file_size_mb = int(os.environ.get("MAX_FILE_SIZE_MB", "30"))
        self.max_file_size = self.max_file_size_mb * 1024 * 1024

        # Address extraction (Gemini)
        self.google_api_key = os.environ.get("GOOGLE_API_KEY", "")
        self.gemini_model = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash-lite")
        self.extract_max_pages = int(os.environ.get("EXTRACT_MAX_PAGES", "3"))

        # Google Places
        self.google_places_api_key = os.environ.get("GOOGLE_PLACES_API_KEY", "")
        self.places_api_url = os.environ.get("PLACES_API_URL", PLACES_AUTOCOMPLETE_URL)

        # Documents
        self.template_path = Path(
            os.environ.get("PROPOSAL_TEMPLATE_PATH", str(DEFAULT_TEMPLATE_PATH))
        )

        # Logging
        self.log_format = os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
        self.log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    def _get_database_url(self) -> str:
        """Get and normalize database URL."""
        url = os.environ.get("DATABASE_URL", "")

        # Handle Render's postgres:// URL (SQLAlchemy requires postgresql://)
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)

        return url

    @property
    def async_database_url(self) -> str:
        """Get async database URL for asyncpg."""
        if not self.database_url:
            return ""
        return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
