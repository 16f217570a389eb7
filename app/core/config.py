# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string)
      - SUPABASE_JWT_SECRET (JWT signing secret used for admin tokens)
      - MIDTRANS_SERVER_KEY (payment gateway)

    Optional:
      - MIDTRANS_IS_PRODUCTION (defaults to sandbox)
      - DEFAULT_DP_PERCENT (down payment percent for online orders)
      - DISPLAY_TIMEZONE (calendar timezone, fixed per deployment)
    """

    PROJECT_NAME: str = "Studio Booking API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Midtrans Snap
    MIDTRANS_SERVER_KEY: str
    MIDTRANS_IS_PRODUCTION: bool = False

    DEFAULT_DP_PERCENT: int = 30
    DISPLAY_TIMEZONE: str = "Asia/Jakarta"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
