"""
Application settings read from the environment (.env supported)
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    return int(v) if v is not None else default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys)
    return float(v) if v is not None else default


def _get_bool(*keys: str, default: bool = False) -> bool:
    v = _get_env(*keys)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    db_path: str = "wildeats.db"
    cart_storage_key: str = "wildeats_cart_v1"
    backend_api_url: str = "http://localhost:8080"
    backend_timeout: float = 10.0
    secret_key: str = "your-secret-key-here"
    port: int = 5000
    debug: bool = False
    currency_symbol: str = "₱"
    max_cart_sessions: int = 1000
    log_level: str = "INFO"


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    # Environment variables win over values from the .env file
    load_dotenv(dotenv_path=dotenv_path)
    defaults = Settings()
    return Settings(
        db_path=_get_env("DB_PATH", "DATABASE_PATH", default=defaults.db_path),
        cart_storage_key=_get_env("CART_STORAGE_KEY", default=defaults.cart_storage_key),
        backend_api_url=_get_env("BACKEND_API_URL", "API_BASE", default=defaults.backend_api_url),
        backend_timeout=_get_float("BACKEND_TIMEOUT", default=defaults.backend_timeout),
        secret_key=_get_env("SECRET_KEY", default=defaults.secret_key),
        port=_get_int("PORT", default=defaults.port),
        debug=_get_bool("DEBUG", default=defaults.debug),
        currency_symbol=_get_env("CURRENCY_SYMBOL", default=defaults.currency_symbol),
        max_cart_sessions=_get_int("MAX_CART_SESSIONS", default=defaults.max_cart_sessions),
        log_level=_get_env("LOG_LEVEL", default=defaults.log_level).upper()
    )
