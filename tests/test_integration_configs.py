from __future__ import annotations

import pytest

from alfred.integrations.messenger import config as messenger_config
from alfred.integrations.mqtt import config as mqtt_config


def _set_messenger_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MESSENGER_APP_SECRET", "secret")
    monkeypatch.setenv("MESSENGER_VALIDATION_TOKEN", "verify")
    monkeypatch.setenv("MESSENGER_PAGE_ACCESS_TOKEN", "page-token")
    monkeypatch.setenv("SERVER_URL", "https://alfred.example.com/")


def test_load_messenger_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_messenger_env(monkeypatch)
    monkeypatch.setenv("MESSENGER_REQUIRE_SIGNATURE", "yes")
    monkeypatch.setenv("MESSENGER_REQUEST_TIMEOUT_SEC", "2.5")

    loaded = messenger_config.load_messenger_config()

    assert loaded.app_secret == "secret"
    assert loaded.validation_token == "verify"
    assert loaded.page_access_token == "page-token"
    assert loaded.server_url == "https://alfred.example.com"
    assert loaded.graph_api_url == messenger_config.DEFAULT_GRAPH_API_URL
    assert loaded.request_timeout_sec == 2.5
    assert loaded.require_signature is True


def test_load_messenger_config_missing_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MESSENGER_APP_SECRET", "secret")

    with pytest.raises(messenger_config.MessengerConfigError) as excinfo:
        messenger_config.load_messenger_config()

    assert "MESSENGER_VALIDATION_TOKEN" in str(excinfo.value)
    assert "SERVER_URL" in str(excinfo.value)


def test_load_messenger_config_rejects_bad_server_url(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_messenger_env(monkeypatch)
    monkeypatch.setenv("SERVER_URL", "alfred.example.com")

    with pytest.raises(messenger_config.MessengerConfigError):
        messenger_config.load_messenger_config()


def test_load_mqtt_config_defaults() -> None:
    loaded = mqtt_config.load_mqtt_config()

    assert loaded.host == "broker.mqtt-dashboard.com"
    assert loaded.port == 1883
    assert loaded.tls is False
    assert loaded.command_topic == "cmd/simple"
    assert loaded.set_topic == "cmd/set"
    assert loaded.telemetry_topics == ("HiAlfredData/tmp", "HiAlfredData/led")
    assert loaded.qos == 0


def test_load_mqtt_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MQTT_BROKER_URL", "mqtts://user:pw@broker.local")
    monkeypatch.setenv("MQTT_CLIENT_ID", "alfred-1")
    monkeypatch.setenv("MQTT_QOS", "5")
    monkeypatch.setenv("MQTT_KEEPALIVE_SEC", "30")
    monkeypatch.setenv("MQTT_TELEMETRY_PREFIX", "home/alfred/")
    monkeypatch.setenv("MQTT_COMMAND_TOPIC", "home/#")

    loaded = mqtt_config.load_mqtt_config()

    assert loaded.host == "broker.local"
    assert loaded.port == 8883
    assert loaded.tls is True
    assert loaded.username == "user"
    assert loaded.password == "pw"
    assert loaded.client_id == "alfred-1"
    assert loaded.qos == 2
    assert loaded.keepalive_sec == 30
    assert loaded.telemetry_topics == ("home/alfred/tmp", "home/alfred/led")
    assert loaded.command_topic == "cmd/simple"


@pytest.mark.parametrize("url", ["http://broker.local", "mqtt://", "mqtt://broker.local:notaport"])
def test_load_mqtt_config_rejects_bad_url(monkeypatch: pytest.MonkeyPatch, url: str) -> None:
    monkeypatch.setenv("MQTT_BROKER_URL", url)

    with pytest.raises(mqtt_config.MqttConfigError):
        mqtt_config.load_mqtt_config()
