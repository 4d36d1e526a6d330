from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from app.constants import DEFAULT_TOKEN_TTL_MINUTES


@dataclass(frozen=True)
class Settings:
    db_path: Path
    jwt_secret: str
    host: str = "0.0.0.0"
    port: int = 5000
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def load_settings() -> Settings:
    """Read settings from the environment (and .env). Missing DB_PATH or JWT_SECRET is fatal."""
    load_dotenv(find_dotenv(usecwd=True))

    db_raw = os.getenv("DB_PATH", "").strip()
    jwt_secret = os.getenv("JWT_SECRET", "").strip()

    if not db_raw:
        raise RuntimeError("DB_PATH missing in environment/.env")
    if not jwt_secret:
        raise RuntimeError("JWT_SECRET missing in environment/.env")

    ttl = _int_env("TOKEN_TTL_MINUTES", DEFAULT_TOKEN_TTL_MINUTES)
    if ttl <= 0:
        raise RuntimeError("TOKEN_TTL_MINUTES must be positive")

    return Settings(
        db_path=Path(db_raw),
        jwt_secret=jwt_secret,
        host=os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=_int_env("PORT", 5000),
        token_ttl_minutes=ttl,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
