"""Bridge entrypoint."""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

from alfred.agent.actions.command_encoder import CommandTopics
from alfred.agent.bridge import ChatBridge
from alfred.agent.services.keepalive import KeepAlivePinger
from alfred.agent.services.outbound_dispatcher import OutboundDispatcher
from alfred.agent.session.state import SessionState
from alfred.config import settings
from alfred.infrastructure.api_gateway import gateway
from alfred.infrastructure.api_server import ApiServer
from alfred.integrations.messenger.config import MessengerConfigError, load_messenger_config
from alfred.integrations.messenger.send_api import MessengerSendClient
from alfred.integrations.mqtt.client import MqttBrokerClient
from alfred.integrations.mqtt.config import MqttConfig, MqttConfigError, load_mqtt_config


def load_env() -> None:
    env_path = Path(__file__).resolve().parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()


def command_topics(config: MqttConfig) -> CommandTopics:
    return CommandTopics(simple=config.command_topic, set_value=config.set_topic)


def main() -> None:
    load_env()
    log_level = settings.get_log_level()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

    try:
        messenger_config = load_messenger_config()
        mqtt_config = load_mqtt_config()
    except (MessengerConfigError, MqttConfigError) as exc:
        logging.critical("Invalid configuration. Shutting down: %s", exc)
        sys.exit(1)

    locale = settings.get_locale()
    logging.info(
        "Bridge config locale=%s broker=%s:%s telemetry_prefix=%s",
        locale,
        mqtt_config.host,
        mqtt_config.port,
        mqtt_config.telemetry_prefix,
    )

    session = SessionState()
    dispatcher = OutboundDispatcher(MessengerSendClient(messenger_config))
    broker = MqttBrokerClient(mqtt_config)
    bridge = ChatBridge(
        session=session,
        publisher=broker,
        replies=dispatcher,
        topics=command_topics(mqtt_config),
        locale=locale,
    )
    broker.set_telemetry_handler(bridge.handle_telemetry)
    gateway.configure(bridge, messenger_config, settings.get_account_linking_auth_code())

    api_server = ApiServer(
        host=settings.get_api_host(),
        port=settings.get_api_port(),
        log_level=log_level,
    )
    keepalive = _build_keepalive()

    dispatcher.start()
    broker.start()
    api_server.start()
    logging.info("Bridge listening on port %s", settings.get_api_port())
    if keepalive:
        keepalive.start()

    stop_event = threading.Event()
    try:
        while not stop_event.wait(timeout=1.0):
            if not api_server.running:
                logging.error("API server stopped unexpectedly.")
                break
    except KeyboardInterrupt:
        logging.info("Shutdown requested (KeyboardInterrupt).")
    finally:
        if keepalive:
            keepalive.stop()
        api_server.stop()
        broker.stop()
        dispatcher.stop()
        gateway.reset()


def _build_keepalive() -> KeepAlivePinger | None:
    url = settings.get_keepalive_url()
    if not url:
        return None
    return KeepAlivePinger(url, settings.get_keepalive_interval_sec())


if __name__ == "__main__":
    main()
