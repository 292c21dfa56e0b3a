"""
Process-wide settings, read once from the environment.

Nothing else in the project calls os.getenv; the HTTP layer hands the loaded
Settings to services that need the signing secret.
"""
import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    database_url: Optional[str] = Field(None, description="Mongo connection string")
    database_name: Optional[str] = Field(None, description="Database to use")
    auth_secret: str = Field("change-me", description="Token signing secret")
    token_ttl_seconds: int = Field(3600, ge=1)
    port: int = 8000
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        database_name=os.getenv("DATABASE_NAME"),
        auth_secret=os.getenv("AUTH_SECRET", "change-me"),
        token_ttl_seconds=int(os.getenv("TOKEN_TTL_SECONDS", "3600")),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
