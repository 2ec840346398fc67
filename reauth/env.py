from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import AnyHttpUrl

from .constants import (
    DEFAULT_LOGIN_PATH,
    DEFAULT_LOGIN_ROUTE,
    DEFAULT_REDIRECT_STORE_PATH,
    DEFAULT_REFRESH_PATH,
    DEFAULT_TIMEOUT,
    LOGGER,
)


@dataclass
class ClientSettings:
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = 0
    refresh_path: str = DEFAULT_REFRESH_PATH
    login_path: str = DEFAULT_LOGIN_PATH
    login_route: str = DEFAULT_LOGIN_ROUTE
    redirect_store_path: str = DEFAULT_REDIRECT_STORE_PATH
    debug: bool = True


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer value.")


def get_env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a numeric value.")


def _get_env_path(key: str, default: str) -> str:
    value = os.getenv(key, "").strip() or default
    if not value.startswith("/"):
        raise RuntimeError(f"{key} must be an absolute path starting with '/'.")
    return value


def load_env(env_path: Path | None = None) -> None:
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(env_path, override=True)


def validate_env() -> None:
    base_url = os.getenv("REAUTH_API_BASE_URL", "").strip()
    if not base_url:
        raise RuntimeError("Missing required environment variable: REAUTH_API_BASE_URL")

    parsed = urlparse(base_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise RuntimeError(
            "REAUTH_API_BASE_URL must be a valid HTTP(S) URL (for example: "
            "https://api.example.com)."
        )

    if get_env_int("REAUTH_MAX_RETRIES", 0) < 0:
        raise RuntimeError("REAUTH_MAX_RETRIES must not be negative.")
    if get_env_float("REAUTH_TIMEOUT", DEFAULT_TIMEOUT) <= 0:
        raise RuntimeError("REAUTH_TIMEOUT must be greater than zero.")


def load_settings() -> ClientSettings:
    validate_env()
    base_url = AnyHttpUrl(os.getenv("REAUTH_API_BASE_URL", "").strip())
    return ClientSettings(
        base_url=str(base_url),
        timeout=get_env_float("REAUTH_TIMEOUT", DEFAULT_TIMEOUT),
        max_retries=get_env_int("REAUTH_MAX_RETRIES", 0),
        refresh_path=_get_env_path("REAUTH_REFRESH_PATH", DEFAULT_REFRESH_PATH),
        login_path=_get_env_path("REAUTH_LOGIN_PATH", DEFAULT_LOGIN_PATH),
        login_route=_get_env_path("REAUTH_LOGIN_ROUTE", DEFAULT_LOGIN_ROUTE),
        redirect_store_path=os.getenv(
            "REAUTH_REDIRECT_STORE_PATH", DEFAULT_REDIRECT_STORE_PATH
        ).strip()
        or DEFAULT_REDIRECT_STORE_PATH,
        debug=is_truthy(os.getenv("REAUTH_DEBUG", "1")),
    )


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("REAUTH_DEBUG", "1"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
