# backend/brain/core/config.py

import logging
import string
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl, Field, field_validator
from typing import List

class Settings(BaseSettings):
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_JWT_SECRET: str
    ALGORITHM: str = "HS256"

    # Share links
    SHARE_TOKEN_LENGTH: int = Field(10, ge=6, le=64)
    SHARE_TOKEN_ALPHABET: str = string.ascii_lowercase + string.digits
    SHARE_TOKEN_MAX_ATTEMPTS: int = Field(5, ge=1)

    # CORS origins
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env")

    @field_validator("SHARE_TOKEN_ALPHABET")
    @classmethod
    def check_alphabet(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("alphabet needs at least 2 characters")
        if len(set(value)) != len(value):
            raise ValueError("alphabet must not repeat characters")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value

settings = Settings()
