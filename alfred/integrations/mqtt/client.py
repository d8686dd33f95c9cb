from __future__ import annotations

import threading
from typing import Any, Callable

import paho.mqtt.client as mqtt

from alfred.agent.io.contracts import BrokerCommand, BrokerTelemetry
from alfred.agent.observability.log_manager import get_component_logger
from alfred.integrations.mqtt.config import MqttConfig

logger = get_component_logger("integrations.mqtt.client")


class MqttPublishError(RuntimeError):
    pass


class MqttBrokerClient:
    """paho-mqtt wrapper: subscribes to telemetry and publishes commands.

    Reconnection is left to paho's network loop; subscriptions are renewed on
    every successful connect.
    """

    def __init__(
        self,
        config: MqttConfig,
        on_telemetry: Callable[[BrokerTelemetry], None] | None = None,
    ) -> None:
        self._config = config
        self._on_telemetry = on_telemetry
        self._connected = threading.Event()
        self._client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=config.client_id or "",
        )
        if config.username:
            self._client.username_pw_set(config.username, config.password)
        if config.tls:
            self._client.tls_set()
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_message = self._on_message

    @property
    def connected(self) -> bool:
        return self._connected.is_set()

    def set_telemetry_handler(self, handler: Callable[[BrokerTelemetry], None]) -> None:
        self._on_telemetry = handler

    def start(self) -> None:
        logger.info(
            "MQTT connecting host=%s port=%s tls=%s",
            self._config.host,
            self._config.port,
            self._config.tls,
        )
        self._client.connect_async(self._config.host, self._config.port, self._config.keepalive_sec)
        self._client.loop_start()

    def stop(self) -> None:
        try:
            self._client.disconnect()
        finally:
            self._client.loop_stop()
            self._connected.clear()

    def wait_connected(self, timeout: float) -> bool:
        return self._connected.wait(timeout=timeout)

    def publish(self, command: BrokerCommand) -> None:
        info = self._client.publish(command.topic, command.payload, qos=self._config.qos)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise MqttPublishError(
                f"MQTT publish failed topic={command.topic} error={mqtt.error_string(info.rc)}"
            )
        logger.info("MQTT published topic=%s payload=%s", command.topic, command.payload)

    def _on_connect(self, client: Any, _userdata: Any, _flags: Any, reason_code: Any, _properties: Any = None) -> None:
        if _is_failure(reason_code):
            logger.warning("MQTT connect refused status=%s", reason_code)
            return
        self._connected.set()
        for topic in self._config.telemetry_topics:
            client.subscribe(topic, qos=self._config.qos)
        logger.info(
            "MQTT connected host=%s topics=%s",
            self._config.host,
            ",".join(self._config.telemetry_topics),
        )

    def _on_disconnect(
        self,
        _client: Any,
        _userdata: Any,
        _flags: Any,
        reason_code: Any = None,
        _properties: Any = None,
    ) -> None:
        self._connected.clear()
        logger.warning("MQTT disconnected status=%s", reason_code)

    def _on_message(self, _client: Any, _userdata: Any, message: Any) -> None:
        telemetry = BrokerTelemetry(topic=str(message.topic), payload=bytes(message.payload or b""))
        logger.debug("MQTT message topic=%s bytes=%s", telemetry.topic, len(telemetry.payload))
        if self._on_telemetry is None:
            return
        try:
            self._on_telemetry(telemetry)
        except Exception as exc:
            logger.exception("MQTT telemetry handler failed topic=%s", telemetry.topic, exc_info=exc)


def _is_failure(reason_code: Any) -> bool:
    is_failure = getattr(reason_code, "is_failure", None)
    if isinstance(is_failure, bool):
        return is_failure
    try:
        return int(reason_code) != 0
    except (TypeError, ValueError):
        return False
