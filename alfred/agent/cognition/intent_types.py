from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IntentKind(str, Enum):
    GREET = "greet"
    QUERY_TEMPERATURE = "query_temperature"
    RAISE_TEMPERATURE = "raise_temperature"
    LOWER_TEMPERATURE = "lower_temperature"
    REQUEST_TEMPERATURE_VALUE = "request_temperature_value"
    SET_TEMPERATURE = "set_temperature"
    QUERY_LED_STATUS = "query_led_status"
    CONFIRM_LED_TOGGLE = "confirm_led_toggle"
    DECLINE_LED_TOGGLE = "decline_led_toggle"
    ACKNOWLEDGE = "acknowledge"
    ECHO = "echo"
    UNRECOGNIZED = "unrecognized"


class AcknowledgementKind(str, Enum):
    ATTACHMENT = "attachment"
    AUTHENTICATION = "authentication"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    value: str | None = None
    text: str | None = None
    acknowledgement: AcknowledgementKind | None = None


def greet() -> Intent:
    return Intent(IntentKind.GREET)


def query_temperature() -> Intent:
    return Intent(IntentKind.QUERY_TEMPERATURE)


def raise_temperature() -> Intent:
    return Intent(IntentKind.RAISE_TEMPERATURE)


def lower_temperature() -> Intent:
    return Intent(IntentKind.LOWER_TEMPERATURE)


def request_temperature_value() -> Intent:
    return Intent(IntentKind.REQUEST_TEMPERATURE_VALUE)


def set_temperature(value: str) -> Intent:
    return Intent(IntentKind.SET_TEMPERATURE, value=value)


def query_led_status() -> Intent:
    return Intent(IntentKind.QUERY_LED_STATUS)


def confirm_led_toggle() -> Intent:
    return Intent(IntentKind.CONFIRM_LED_TOGGLE)


def decline_led_toggle() -> Intent:
    return Intent(IntentKind.DECLINE_LED_TOGGLE)


def acknowledge(kind: AcknowledgementKind) -> Intent:
    return Intent(IntentKind.ACKNOWLEDGE, acknowledgement=kind)


def echo(text: str) -> Intent:
    return Intent(IntentKind.ECHO, text=text)


def unrecognized(raw_text: str) -> Intent:
    return Intent(IntentKind.UNRECOGNIZED, text=raw_text)
