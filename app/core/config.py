# /app/core/config.py

"""
Runtime configuration for the rating backend.

Values come from the process environment, optionally seeded from a local
`.env` file. `get_settings()` is cached so every caller shares one instance;
tests build their own `Settings` directly.
"""

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    database_url: str = Field(default="sqlite:///./ratings.db")
    jwt_secret: str = Field(default="CHANGE_ME_TO_A_SECURE_RANDOM_KEY")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24)
    otp_expire_minutes: int = Field(default=5)

    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_from: Optional[str] = None

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Builds the Settings object from environment variables."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./ratings.db"),
        jwt_secret=os.getenv("JWT_SECRET", "CHANGE_ME_TO_A_SECURE_RANDOM_KEY"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)),
        otp_expire_minutes=int(os.getenv("OTP_EXPIRE_MINUTES", 5)),
        smtp_host=os.getenv("SMTP_HOST"),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        smtp_user=os.getenv("SMTP_USER"),
        smtp_pass=os.getenv("SMTP_PASS"),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
