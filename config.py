"""Configuration management for snaplink."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3001,
        description="Port to listen on"
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:3001",
        description="Base URL for short links when the request does not provide one"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_id_bytes: int = Field(
        default=4,
        ge=1,
        description="Random bytes per generated short id (hex encoded, so 4 -> 8 chars)"
    )

    enable_custom_slugs: bool = Field(
        default=True,
        description="Allow users to provide custom slugs"
    )

    # Storage settings
    data_dir: str = Field(
        default="data",
        description="Directory holding the URL document, relative to the working directory"
    )

    data_file: str = Field(
        default="urls.json",
        description="File name of the URL document"
    )

    # Expiry sweep
    sweep_interval_seconds: float = Field(
        default=3600,
        gt=0,
        description="Seconds between sweeps of expired URLs"
    )

    # QR code rendering
    qr_box_size: int = Field(
        default=10,
        ge=1,
        description="Pixels per QR module"
    )

    qr_border: int = Field(
        default=4,
        ge=0,
        description="QR quiet zone width in modules"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
