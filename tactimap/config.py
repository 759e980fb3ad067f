"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    tactimap_env: str = "development"
    tactimap_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Pipeline defaults
    default_tolerance_m: float = 2.0
    # Montreal (~45.5° N); only valid near that latitude
    metres_per_degree: float = 78710.0

    # Page, mm (A4 landscape)
    page_width: float = 297.0
    page_height: float = 210.0
    page_margin: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
