from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Process settings pulled from ``WICW_``-prefixed environment variables."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (console or json)")

    # Generation Configuration
    level_config_path: Optional[str] = Field(
        default=None, description="JSON file with the level curve, defaults are used when unset"
    )
    worker_count: int = Field(default=4, ge=1, description="Workers for cell-parallel grid stages")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    class Config:
        env_prefix = "WICW_"
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    """Read settings from the environment."""
    return Settings()
