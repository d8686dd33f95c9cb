from alfred.integrations.mqtt.client import MqttBrokerClient, MqttPublishError
from alfred.integrations.mqtt.config import (
    MqttConfig,
    MqttConfigError,
    load_mqtt_config,
)

__all__ = [
    "MqttBrokerClient",
    "MqttConfig",
    "MqttConfigError",
    "MqttPublishError",
    "load_mqtt_config",
]
