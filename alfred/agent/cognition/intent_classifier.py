from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from alfred.agent.cognition import intent_types as intents
from alfred.agent.cognition.intent_types import AcknowledgementKind, Intent
from alfred.agent.io.contracts import (
    AccountLinkingEvent,
    ChatEvent,
    DeliveryEvent,
    MessageEvent,
    OptinEvent,
    PostbackEvent,
    ReadEvent,
)

# ASCII word semantics: accented letters are dropped, so "température"
# normalizes to "temprature".
_PUNCTUATION = re.compile(r"[^\w\s]", re.ASCII)

PAYLOAD_INTENTS: dict[str, Intent] = {
    "LED": intents.query_led_status(),
    "LED_SET_YES": intents.confirm_led_toggle(),
    "LED_SET_NO": intents.decline_led_toggle(),
    "TMP_SENSOR_GET": intents.query_temperature(),
    "TMP_SENSOR_SET": intents.request_temperature_value(),
    "RESTART": intents.greet(),
    "GET_STARTED": intents.greet(),
}

TEXT_INTENTS: dict[str, Intent] = {
    "hello": intents.greet(),
    "hi": intents.greet(),
    "temperature": intents.query_temperature(),
    "temprature": intents.query_temperature(),
    "temp": intents.query_temperature(),
    "tmp": intents.query_temperature(),
    "+": intents.raise_temperature(),
    "up": intents.raise_temperature(),
    "-": intents.lower_temperature(),
    "down": intents.lower_temperature(),
    "led": intents.query_led_status(),
    "light": intents.query_led_status(),
    "lamp": intents.query_led_status(),
    "set temperature": intents.request_temperature_value(),
    "set temp": intents.request_temperature_value(),
    "set": intents.request_temperature_value(),
}

_VALUE_ENTITY_NAMES = ("temperature", "number")


@dataclass(frozen=True)
class Classification:
    intent: Intent | None
    clear_awaiting: bool = False


def classify(event: ChatEvent, awaiting_value: bool) -> Classification:
    """Map one chat event to at most one intent.

    Payload-bearing events are resolved from the payload table and never fall
    back to text matching. When a value is awaited, the next text message is
    taken as that value and the flag must be cleared by the caller.
    """
    if isinstance(event, PostbackEvent):
        return Classification(_classify_payload(event.payload))
    if isinstance(event, OptinEvent):
        return Classification(intents.acknowledge(AcknowledgementKind.AUTHENTICATION))
    if isinstance(event, (DeliveryEvent, ReadEvent, AccountLinkingEvent)):
        return Classification(None)
    if not isinstance(event, MessageEvent) or event.is_echo:
        return Classification(None)

    if event.quick_reply_payload:
        # Quick replies carry text and end the awaited-value turn.
        has_text = bool(str(event.text or "").strip())
        return Classification(
            _classify_payload(event.quick_reply_payload),
            clear_awaiting=awaiting_value and has_text,
        )

    text = event.text
    if text is None or not str(text).strip():
        if event.attachments:
            return Classification(intents.acknowledge(AcknowledgementKind.ATTACHMENT))
        return Classification(None)

    if awaiting_value:
        value = extract_entity_value(event.nlp_entities) or _awaited_value_text(text)
        if not value:
            return Classification(intents.unrecognized(text), clear_awaiting=True)
        return Classification(intents.set_temperature(value), clear_awaiting=True)

    return Classification(classify_text(text))


def classify_text(text: str) -> Intent:
    normalized = normalize_text(text)
    key = normalized or str(text or "").strip().lower()
    matched = TEXT_INTENTS.get(key)
    if matched is not None:
        return matched
    return intents.echo(text)


def normalize_text(text: str) -> str:
    stripped = _PUNCTUATION.sub("", str(text or ""))
    return stripped.strip().lower()


def extract_entity_value(entities: dict[str, Any] | None) -> str | None:
    if not isinstance(entities, dict) or not entities:
        return None
    for name in _VALUE_ENTITY_NAMES:
        candidates: list[dict[str, Any]] = []
        for key, values in entities.items():
            if not _entity_key_matches(str(key), name) or not isinstance(values, list):
                continue
            candidates.extend(item for item in values if isinstance(item, dict) and "value" in item)
        if not candidates:
            continue
        best = max(candidates, key=lambda item: _as_confidence(item.get("confidence")))
        value = _format_entity_value(best.get("value"))
        if value:
            return value
    return None


def _awaited_value_text(text: str) -> str:
    raw = str(text).strip()
    try:
        float(raw)
    except ValueError:
        return normalize_text(raw)
    return raw


def _classify_payload(payload: str) -> Intent:
    matched = PAYLOAD_INTENTS.get(str(payload))
    if matched is not None:
        return matched
    return intents.unrecognized(str(payload))


def _entity_key_matches(key: str, name: str) -> bool:
    # Wit-style keys look like "wit$temperature:temperature".
    base = key.split(":", 1)[0]
    return base == name or base.endswith(f"${name}")


def _as_confidence(raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 0.0


def _format_entity_value(raw: Any) -> str | None:
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    if isinstance(raw, (int, float)):
        return str(raw)
    text = str(raw).strip()
    return text or None
