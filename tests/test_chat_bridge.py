from __future__ import annotations

import logging

from alfred.agent.actions.command_encoder import CommandTopics
from alfred.agent.bridge import ChatBridge
from alfred.agent.cognition.intent_types import IntentKind
from alfred.agent.io.contracts import (
    BrokerCommand,
    BrokerTelemetry,
    DeliveryEvent,
    MessageEvent,
    OptinEvent,
    PostbackEvent,
    SenderAction,
)
from alfred.agent.session.state import PendingRequest, RequestKind, SessionState
from alfred.integrations.mqtt.client import MqttPublishError


def _bridge(publisher, replies, **kwargs) -> ChatBridge:
    return ChatBridge(session=SessionState(), publisher=publisher, replies=replies, **kwargs)


def test_temperature_query_round_trip(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    outcome = bridge.handle_chat_event(MessageEvent(sender_id="A", text="temperature"))

    assert outcome.intent is not None
    assert outcome.intent.kind == IntentKind.QUERY_TEMPERATURE
    assert publisher.published == [BrokerCommand(topic="cmd/simple", payload="0")]
    assert bridge.session.peek_pending() == PendingRequest(user="A", kind=RequestKind.TEMPERATURE_QUERY)
    assert replies.actions == [("A", SenderAction.TYPING_ON)]
    assert replies.texts == []

    bridge.handle_telemetry(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"21"))

    assert [(sent.recipient_id, sent.text) for sent in replies.texts] == [
        ("A", "The temperature is actually 21°C")
    ]
    assert bridge.session.peek_pending() is None


def test_led_postback_round_trip(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_chat_event(PostbackEvent(sender_id="A", payload="LED"))

    assert publisher.published == [BrokerCommand(topic="cmd/simple", payload="3")]
    assert bridge.session.peek_pending() == PendingRequest(user="A", kind=RequestKind.LED_STATUS_QUERY)

    bridge.handle_telemetry(BrokerTelemetry(topic="HiAlfredData/led", payload=b"1"))

    sent = replies.texts[0]
    assert sent.recipient_id == "A"
    assert "turn it off" in sent.text
    assert [reply.payload for reply in sent.quick_replies or []] == ["LED_SET_YES", "LED_SET_NO"]


def test_confirm_led_toggle_publishes_and_acknowledges(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_chat_event(MessageEvent(sender_id="A", text="Yes", quick_reply_payload="LED_SET_YES"))

    assert publisher.published == [BrokerCommand(topic="cmd/simple", payload="4")]
    assert [sent.text for sent in replies.texts] == ["Done! 👍🏼"]


def test_telemetry_with_nothing_pending(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_telemetry(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"18"))

    assert replies.texts == []


def test_unmatched_text_is_echoed_without_publish(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    outcome = bridge.handle_chat_event(MessageEvent(sender_id="A", text="banana"))

    assert outcome.command is None
    assert publisher.published == []
    assert [(sent.recipient_id, sent.text) for sent in replies.texts] == [("A", "banana")]


def test_second_query_steals_pending_slot(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_chat_event(MessageEvent(sender_id="A", text="temp"))
    bridge.handle_chat_event(MessageEvent(sender_id="B", text="temp"))
    bridge.handle_telemetry(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"19"))

    assert [sent.recipient_id for sent in replies.texts] == ["B"]


def test_set_temperature_flow(publisher, replies) -> None:
    bridge = _bridge(publisher, replies, topics=CommandTopics(simple="cmd/simple", set_value="cmd/set"))

    bridge.handle_chat_event(PostbackEvent(sender_id="A", payload="TMP_SENSOR_SET"))
    assert bridge.session.is_awaiting_value() is True
    assert publisher.published == []
    assert [sent.text for sent in replies.texts] == ["Which temperature would you like?"]

    outcome = bridge.handle_chat_event(MessageEvent(sender_id="A", text="23"))

    assert outcome.intent is not None
    assert outcome.intent.kind == IntentKind.SET_TEMPERATURE
    assert publisher.published == [BrokerCommand(topic="cmd/set", payload="23")]
    assert bridge.session.is_awaiting_value() is False
    assert replies.texts[-1].text == "Setting the temperature to 23°C"


def test_awaiting_flag_is_not_consumed_by_postback(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)
    bridge.session.set_awaiting_value(True)

    bridge.handle_chat_event(PostbackEvent(sender_id="A", payload="GET_STARTED"))

    assert bridge.session.is_awaiting_value() is True
    assert [sent.text for sent in replies.texts] == ["Hi! I'm Alfred 👨🏻"]


def test_quick_reply_ends_awaited_value(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_chat_event(PostbackEvent(sender_id="A", payload="TMP_SENSOR_SET"))
    bridge.handle_chat_event(MessageEvent(sender_id="A", text="No", quick_reply_payload="LED_SET_NO"))

    assert bridge.session.is_awaiting_value() is False

    bridge.handle_chat_event(MessageEvent(sender_id="A", text="temp"))

    assert publisher.published == [BrokerCommand(topic="cmd/simple", payload="0")]


def test_decimal_temperature_is_published_as_typed(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)
    bridge.session.set_awaiting_value(True)

    bridge.handle_chat_event(MessageEvent(sender_id="A", text="21.5"))

    assert publisher.published == [BrokerCommand(topic="cmd/set", payload="21.5")]
    assert replies.texts[-1].text == "Setting the temperature to 21.5°C"


def test_raise_and_lower_acknowledgements(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_chat_event(MessageEvent(sender_id="A", text="+"))
    bridge.handle_chat_event(MessageEvent(sender_id="A", text="down"))

    assert [command.payload for command in publisher.published] == ["2", "-"]
    assert [sent.text for sent in replies.texts] == ["UP temperature", "DOWN temperature"]


def test_optin_and_passive_events(publisher, replies) -> None:
    bridge = _bridge(publisher, replies)

    bridge.handle_chat_event(OptinEvent(sender_id="A", ref="ref-1"))
    outcome = bridge.handle_chat_event(DeliveryEvent(sender_id="A", mids=("m1",), watermark=10))

    assert outcome.intent is None
    assert [sent.text for sent in replies.texts] == ["Authentication successful"]
    assert publisher.published == []


def test_publish_failure_is_logged_and_turn_completes(replies, caplog) -> None:
    class _Publisher:
        def publish(self, command):
            raise MqttPublishError("not connected")

    bridge = ChatBridge(session=SessionState(), publisher=_Publisher(), replies=replies)

    outcome = bridge.handle_chat_event(MessageEvent(sender_id="A", text="temp"))

    assert outcome.command == BrokerCommand(topic="cmd/simple", payload="0")
    assert bridge.session.peek_pending() is not None
    assert replies.actions == [("A", SenderAction.TYPING_ON)]
    assert "publish failed" in caplog.text


def test_french_locale_replies(publisher, replies, caplog) -> None:
    caplog.set_level(logging.INFO)
    bridge = _bridge(publisher, replies, locale="fr-FR")

    bridge.handle_chat_event(MessageEvent(sender_id="A", text="temp"))
    bridge.handle_telemetry(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"20"))

    assert replies.texts[0].text == "La température est actuellement de 20°C"
    assert "chat turn" in caplog.text
