"""
PackTrack Backend — Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types, and provides a singleton `settings` object.
Who:   Imported by main.py and by the app factory; tests build their own
       Settings instances and pass them to create_app().

The only setting a deployment normally touches is PORT. Everything else has
a default that matches the bundled `public/` directory.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# backend/public, next to the package
DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=7860, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # Comma-separated list; "*" allows every origin
    cors_origins: str = Field(default="*")

    # ── Storage ───────────────────────────────────────────────────────────
    # Public tree served at "/". Holds the record document, the upload
    # directory and the client UI assets.
    public_dir: str = Field(default=str(DEFAULT_PUBLIC_DIR))
    data_file_name: str = Field(default="upload.json")
    uploads_subdir: str = Field(default="uploads")
    index_file_name: str = Field(default="index.html")

    # ── Package Defaults ──────────────────────────────────────────────────
    placeholder_image: str = Field(default="/placeholder.svg?height=200&width=200")

    # Writes the sample global packages when no record document exists yet
    seed_sample_packages: bool = Field(default=True)

    # Printed at startup for the client console; never checked by the API
    admin_password: str = Field(default="admin123")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def public_path(self) -> Path:
        return Path(self.public_dir).resolve()

    @property
    def data_file(self) -> Path:
        return self.public_path / self.data_file_name

    @property
    def uploads_dir(self) -> Path:
        return self.public_path / self.uploads_subdir

    @property
    def index_file(self) -> Path:
        return self.public_path / self.index_file_name


settings = Settings()
