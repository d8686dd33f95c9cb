from __future__ import annotations

import os

DEFAULT_LOCALE = "en-US"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 5000
DEFAULT_KEEPALIVE_INTERVAL_SEC = 1200.0
DEFAULT_ACCOUNT_LINKING_AUTH_CODE = "1234567890"

SUPPORTED_LOCALES = ("en-US", "fr-FR")


def get_locale() -> str:
    configured = os.getenv("ALFRED_LOCALE")
    locale = (
        configured.strip()
        if isinstance(configured, str) and configured.strip()
        else DEFAULT_LOCALE
    )
    for supported in SUPPORTED_LOCALES:
        if supported.lower() == locale.lower():
            return supported
    language = locale.split("-", 1)[0].lower()
    for supported in SUPPORTED_LOCALES:
        if supported.split("-", 1)[0].lower() == language:
            return supported
    return DEFAULT_LOCALE


def get_log_level() -> str:
    configured = str(os.getenv("ALFRED_LOG_LEVEL") or "").strip().upper()
    if configured in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return configured
    return DEFAULT_LOG_LEVEL


def get_api_host() -> str:
    configured = os.getenv("ALFRED_API_HOST")
    if isinstance(configured, str) and configured.strip():
        return configured.strip()
    return DEFAULT_API_HOST


def get_api_port() -> int:
    configured = os.getenv("ALFRED_API_PORT") or os.getenv("PORT")
    if configured is None:
        return DEFAULT_API_PORT
    try:
        port = int(configured)
    except (TypeError, ValueError):
        return DEFAULT_API_PORT
    if not 0 < port < 65536:
        return DEFAULT_API_PORT
    return port


def get_keepalive_url() -> str | None:
    configured = os.getenv("ALFRED_KEEPALIVE_URL")
    if isinstance(configured, str) and configured.strip():
        return configured.strip()
    return None


def get_keepalive_interval_sec() -> float:
    configured = os.getenv("ALFRED_KEEPALIVE_INTERVAL_SEC")
    if configured is None:
        return DEFAULT_KEEPALIVE_INTERVAL_SEC
    try:
        value = float(configured)
    except (TypeError, ValueError):
        return DEFAULT_KEEPALIVE_INTERVAL_SEC
    return max(1.0, value)


def get_account_linking_auth_code() -> str:
    configured = os.getenv("ALFRED_ACCOUNT_LINKING_AUTH_CODE")
    if isinstance(configured, str) and configured.strip():
        return configured.strip()
    return DEFAULT_ACCOUNT_LINKING_AUTH_CODE
