from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

DEFAULT_BROKER_URL = "mqtt://broker.mqtt-dashboard.com"
DEFAULT_COMMAND_TOPIC = "cmd/simple"
DEFAULT_SET_TOPIC = "cmd/set"
DEFAULT_TELEMETRY_PREFIX = "HiAlfredData"
TELEMETRY_SUFFIXES = ("tmp", "led")

_DEFAULT_PORTS = {"mqtt": 1883, "tcp": 1883, "mqtts": 8883, "ssl": 8883}


@dataclass(frozen=True)
class MqttConfig:
    host: str
    port: int = 1883
    tls: bool = False
    client_id: str | None = None
    username: str | None = None
    password: str | None = None
    keepalive_sec: int = 60
    qos: int = 0
    command_topic: str = DEFAULT_COMMAND_TOPIC
    set_topic: str = DEFAULT_SET_TOPIC
    telemetry_prefix: str = DEFAULT_TELEMETRY_PREFIX

    @property
    def telemetry_topics(self) -> tuple[str, ...]:
        prefix = self.telemetry_prefix.rstrip("/")
        return tuple(f"{prefix}/{suffix}" for suffix in TELEMETRY_SUFFIXES)


class MqttConfigError(ValueError):
    pass


def load_mqtt_config() -> MqttConfig:
    values = _env_config_values()
    broker_url = str(values.get("MQTT_BROKER_URL") or DEFAULT_BROKER_URL).strip()
    parsed = urlparse(broker_url)
    scheme = (parsed.scheme or "").lower()
    if scheme not in _DEFAULT_PORTS:
        raise MqttConfigError("MQTT_BROKER_URL must start with mqtt:// or mqtts://")
    if not parsed.hostname:
        raise MqttConfigError("MQTT_BROKER_URL must include a host")
    try:
        port = parsed.port or _DEFAULT_PORTS[scheme]
    except ValueError as exc:
        raise MqttConfigError(f"MQTT_BROKER_URL has an invalid port: {exc}") from exc

    return MqttConfig(
        host=parsed.hostname,
        port=port,
        tls=scheme in {"mqtts", "ssl"},
        client_id=_as_optional_str(values.get("MQTT_CLIENT_ID")),
        username=_as_optional_str(values.get("MQTT_USERNAME") or parsed.username),
        password=_as_optional_str(values.get("MQTT_PASSWORD") or parsed.password),
        keepalive_sec=_as_int(values.get("MQTT_KEEPALIVE_SEC"), 60, minimum=5),
        qos=min(2, _as_int(values.get("MQTT_QOS"), 0, minimum=0)),
        command_topic=_as_topic(values.get("MQTT_COMMAND_TOPIC"), DEFAULT_COMMAND_TOPIC),
        set_topic=_as_topic(values.get("MQTT_SET_TOPIC"), DEFAULT_SET_TOPIC),
        telemetry_prefix=_as_topic(values.get("MQTT_TELEMETRY_PREFIX"), DEFAULT_TELEMETRY_PREFIX),
    )


def _env_config_values() -> dict[str, Any]:
    keys = {
        "MQTT_BROKER_URL",
        "MQTT_CLIENT_ID",
        "MQTT_USERNAME",
        "MQTT_PASSWORD",
        "MQTT_KEEPALIVE_SEC",
        "MQTT_QOS",
        "MQTT_COMMAND_TOPIC",
        "MQTT_SET_TOPIC",
        "MQTT_TELEMETRY_PREFIX",
    }
    return {key: os.getenv(key) for key in keys}


def _as_int(raw: Any, default: int, *, minimum: int | None = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = default
    if minimum is not None:
        return max(minimum, value)
    return value


def _as_optional_str(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _as_topic(raw: Any, default: str) -> str:
    text = str(raw or "").strip()
    if not text or any(char in text for char in "#+"):
        return default
    return text
