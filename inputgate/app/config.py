# inputgate/app/config.py

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Input Validation Gate"
    PROJECT_VERSION: str = "1.0.0"

    # ── Environment mode  (development | production) ──
    APP_ENV: str = "development"
    DEBUG: bool = False

    # ── Listener ──
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
