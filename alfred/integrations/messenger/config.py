from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

DEFAULT_GRAPH_API_URL = "https://graph.facebook.com/v2.6/me/messages"

_REQUIRED_KEYS = (
    "MESSENGER_APP_SECRET",
    "MESSENGER_VALIDATION_TOKEN",
    "MESSENGER_PAGE_ACCESS_TOKEN",
    "SERVER_URL",
)


@dataclass(frozen=True)
class MessengerConfig:
    app_secret: str
    validation_token: str
    page_access_token: str
    server_url: str
    graph_api_url: str = DEFAULT_GRAPH_API_URL
    request_timeout_sec: float = 10.0
    require_signature: bool = False


class MessengerConfigError(ValueError):
    pass


def load_messenger_config() -> MessengerConfig:
    values = _env_config_values()
    missing = [key for key in _REQUIRED_KEYS if not str(values.get(key) or "").strip()]
    if missing:
        raise MessengerConfigError(f"Missing config values: {', '.join(missing)}")

    server_url = str(values["SERVER_URL"]).strip().rstrip("/")
    if not server_url.startswith(("http://", "https://")):
        raise MessengerConfigError("SERVER_URL must start with http:// or https://")
    graph_api_url = str(values.get("MESSENGER_GRAPH_API_URL") or DEFAULT_GRAPH_API_URL).strip()
    if not graph_api_url.startswith(("http://", "https://")):
        raise MessengerConfigError("MESSENGER_GRAPH_API_URL must start with http:// or https://")

    return MessengerConfig(
        app_secret=str(values["MESSENGER_APP_SECRET"]).strip(),
        validation_token=str(values["MESSENGER_VALIDATION_TOKEN"]).strip(),
        page_access_token=str(values["MESSENGER_PAGE_ACCESS_TOKEN"]).strip(),
        server_url=server_url,
        graph_api_url=graph_api_url,
        request_timeout_sec=_as_float(values.get("MESSENGER_REQUEST_TIMEOUT_SEC"), 10.0, minimum=1.0),
        require_signature=_as_bool(values.get("MESSENGER_REQUIRE_SIGNATURE"), False),
    )


def _env_config_values() -> dict[str, Any]:
    keys = {
        *_REQUIRED_KEYS,
        "MESSENGER_GRAPH_API_URL",
        "MESSENGER_REQUEST_TIMEOUT_SEC",
        "MESSENGER_REQUIRE_SIGNATURE",
    }
    return {key: os.getenv(key) for key in keys}


def _as_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def _as_float(raw: Any, default: float, *, minimum: float | None = None) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = default
    if minimum is not None:
        return max(minimum, value)
    return value
