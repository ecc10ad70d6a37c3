"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "todoapp"
    storage_backend: str = "mongo"      # "mongo" | "memory"

    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = ""                # HMAC secret for session tokens (required)
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = 86400     # 24 hours
    bcrypt_rounds: int = 12

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: List[str] = ["http://localhost:3000"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
