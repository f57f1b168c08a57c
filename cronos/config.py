# cronos/config.py

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

env_file_path = os.getenv("ENV_FILE", ".env")
load_dotenv(env_file_path)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=env_file_path,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Storage. "memory://" keeps everything in process (tests, demos)
    DATABASE_URL: str = "sqlite:///./cronos.db"
    SEED_DEMO_DATA: bool = True

    # Auth (client-side role selection, tokens only carry the chosen role)
    SECRET_KEY: str = "change-me-later"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Natural-language assistant. Without a key the feature is unavailable
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Payment method recorded on auto-created transactions when none is set
    DEFAULT_PAYMENT_METHOD: str = "money"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
