from __future__ import annotations

from dataclasses import dataclass

from alfred.agent.cognition.intent_types import Intent, IntentKind
from alfred.agent.io.contracts import BrokerCommand

DEFAULT_SIMPLE_TOPIC = "cmd/simple"
DEFAULT_SET_TOPIC = "cmd/set"

# Device opcodes on the simple command topic.
SIMPLE_PAYLOADS: dict[IntentKind, str] = {
    IntentKind.QUERY_TEMPERATURE: "0",
    IntentKind.RAISE_TEMPERATURE: "2",
    IntentKind.LOWER_TEMPERATURE: "-",
    IntentKind.QUERY_LED_STATUS: "3",
    IntentKind.CONFIRM_LED_TOGGLE: "4",
}


@dataclass(frozen=True)
class CommandTopics:
    simple: str = DEFAULT_SIMPLE_TOPIC
    set_value: str = DEFAULT_SET_TOPIC


def encode(intent: Intent, topics: CommandTopics | None = None) -> BrokerCommand | None:
    topics = topics or CommandTopics()
    payload = SIMPLE_PAYLOADS.get(intent.kind)
    if payload is not None:
        return BrokerCommand(topic=topics.simple, payload=payload)
    if intent.kind == IntentKind.SET_TEMPERATURE and intent.value:
        return BrokerCommand(topic=topics.set_value, payload=str(intent.value))
    return None
