"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_ALLOWED_APP_MODES = {"cloud"}
_PLACEHOLDER_API_KEYS = {"your_serper_api_key_here"}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _require_app_mode() -> str:
    """
    Read and validate APP_MODE from the environment.

    APP_MODE must be explicitly set to 'cloud'. Any other value, or the
    absence of the variable, raises RuntimeError to prevent silent local
    fallback behaviour.
    """

    _load_env_once()
    raw = os.getenv("APP_MODE")
    if raw is None:
        raise RuntimeError("APP_MODE must be explicitly set to 'cloud'.")
    mode = raw.strip().lower()
    if mode not in _ALLOWED_APP_MODES:
        raise RuntimeError(
            f"APP_MODE '{raw.strip()}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_APP_MODES)}."
        )
    return mode


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level application mode settings.
    """

    mode: str


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.

    Raises RuntimeError if APP_MODE is missing or not set to 'cloud'.
    """

    return AppSettings(mode=_require_app_mode())


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class PrimaryAPISettings:
    """
    Hosted search API (Serper) settings.
    """

    api_key: str | None = None
    base_url: str = "https://google.serper.dev/search"
    result_count: int = 5
    timeout_seconds: float = 15.0
    gl: str = "us"
    hl: str = "en"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key not in _PLACEHOLDER_API_KEYS


@dataclass(frozen=True)
class BrowserSettings:
    """
    Headless browser automation settings.
    """

    headless: bool = True
    navigation_timeout_ms: int = 30000
    signal_wait_timeout_ms: int = 15000
    hard_timeout_seconds: float = 45.0
    locale: str = "en-US"
    timezone_id: str = "America/New_York"


@dataclass(frozen=True)
class CheckPipelineSettings:
    """
    Index-check orchestration settings.
    """

    cache_freshness_hours: float = 168.0
    api_concurrency: int = 10
    browser_concurrency: int = 2
    guest_url_cap: int = 30
    user_url_cap: int = 500
    guest_daily_quota: int = 30
    ambiguous_as_indexed: bool = False


@dataclass(frozen=True)
class SecuritySettings:
    """
    Request-origin and request-token validation settings.
    """

    secret: str
    allowed_origin: str = "https://indexy.app"
    environment: str = "local"

    @property
    def enforce_origin(self) -> bool:
        return self.environment == "production"


@dataclass(frozen=True)
class AuthSettings:
    """
    Session cookie settings.
    """

    jwt_secret: str
    cookie_name: str = "indexy_session"
    max_age_days: int = 30
    cookie_secure: bool = False
    algorithm: str = "HS256"


@lru_cache(maxsize=1)
def get_primary_api_settings() -> PrimaryAPISettings:
    """
    Return primary search API settings from environment variables.
    """

    return PrimaryAPISettings(
        api_key=_get_optional_str_env("SERPER_API_KEY"),
        base_url=_get_str_env("SERPER_API_URL", "https://google.serper.dev/search"),
        result_count=max(1, _get_int_env("SERPER_RESULT_COUNT", 5)),
        timeout_seconds=max(1.0, _get_float_env("SERPER_TIMEOUT_SECONDS", 15.0)),
        gl=_get_str_env("SERPER_GL", "us"),
        hl=_get_str_env("SERPER_HL", "en"),
    )


@lru_cache(maxsize=1)
def get_browser_settings() -> BrowserSettings:
    """
    Return browser automation settings from environment variables.
    """

    return BrowserSettings(
        headless=_get_bool_env("BROWSER_HEADLESS", True),
        navigation_timeout_ms=max(1000, _get_int_env("BROWSER_NAVIGATION_TIMEOUT_MS", 30000)),
        signal_wait_timeout_ms=max(0, _get_int_env("BROWSER_SIGNAL_WAIT_TIMEOUT_MS", 15000)),
        hard_timeout_seconds=max(1.0, _get_float_env("BROWSER_HARD_TIMEOUT_SECONDS", 45.0)),
        locale=_get_str_env("BROWSER_LOCALE", "en-US"),
        timezone_id=_get_str_env("BROWSER_TIMEZONE", "America/New_York"),
    )


@lru_cache(maxsize=1)
def get_check_pipeline_settings() -> CheckPipelineSettings:
    """
    Return check orchestration settings from environment variables.
    """

    return CheckPipelineSettings(
        cache_freshness_hours=max(0.0, _get_float_env("CHECK_CACHE_FRESHNESS_HOURS", 168.0)),
        api_concurrency=max(1, _get_int_env("CHECK_API_CONCURRENCY", 10)),
        browser_concurrency=max(1, _get_int_env("CHECK_BROWSER_CONCURRENCY", 2)),
        guest_url_cap=max(1, _get_int_env("CHECK_GUEST_URL_CAP", 30)),
        user_url_cap=max(1, _get_int_env("CHECK_USER_URL_CAP", 500)),
        guest_daily_quota=max(1, _get_int_env("CHECK_GUEST_DAILY_QUOTA", 30)),
        ambiguous_as_indexed=_get_bool_env("CHECK_AMBIGUOUS_AS_INDEXED", False),
    )


@lru_cache(maxsize=1)
def get_security_settings() -> SecuritySettings:
    """
    Return ingress security settings.

    Raises RuntimeError if API_SECURITY_SECRET is missing.
    """

    secret = _get_optional_str_env("API_SECURITY_SECRET")
    if secret is None:
        raise RuntimeError("API_SECURITY_SECRET must be set.")
    return SecuritySettings(
        secret=secret,
        allowed_origin=_get_str_env("ALLOWED_ORIGIN", "https://indexy.app"),
        environment=_get_str_env("ENVIRONMENT", "local").lower(),
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """
    Return session cookie settings.

    Raises RuntimeError if JWT_SECRET is missing.
    """

    jwt_secret = _get_optional_str_env("JWT_SECRET")
    if jwt_secret is None:
        raise RuntimeError("JWT_SECRET must be set.")
    return AuthSettings(
        jwt_secret=jwt_secret,
        cookie_name=_get_str_env("SESSION_COOKIE_NAME", "indexy_session"),
        max_age_days=max(1, _get_int_env("SESSION_MAX_AGE_DAYS", 30)),
        cookie_secure=_get_bool_env("SESSION_COOKIE_SECURE", False),
    )
