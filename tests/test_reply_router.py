from __future__ import annotations

import logging

import pytest

from alfred.agent.actions.reply_router import (
    LED_SET_NO,
    LED_SET_YES,
    ReplyRouter,
    TelemetryPayloadError,
    decode_payload,
)
from alfred.agent.io.contracts import BrokerTelemetry
from alfred.agent.session.state import RequestKind, SessionState


def test_temperature_reading_goes_to_waiting_user(replies) -> None:
    state = SessionState()
    state.begin_pending("A", RequestKind.TEMPERATURE_QUERY)
    router = ReplyRouter(state, replies)

    router.route(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"21"))

    assert [(sent.recipient_id, sent.text) for sent in replies.texts] == [
        ("A", "The temperature is actually 21°C")
    ]
    assert state.peek_pending() is None


@pytest.mark.parametrize(
    ("payload", "wording"),
    [(b"1", "turn it off"), (b"0", "turn it on")],
)
def test_led_status_offers_toggle(replies, payload: bytes, wording: str) -> None:
    state = SessionState()
    state.begin_pending("A", RequestKind.LED_STATUS_QUERY)
    router = ReplyRouter(state, replies)

    router.route(BrokerTelemetry(topic="HiAlfredData/led", payload=payload))

    assert len(replies.texts) == 1
    sent = replies.texts[0]
    assert sent.recipient_id == "A"
    assert wording in sent.text
    assert [reply.payload for reply in sent.quick_replies or []] == [LED_SET_YES, LED_SET_NO]


def test_led_status_in_french(replies) -> None:
    state = SessionState()
    state.begin_pending("A", RequestKind.LED_STATUS_QUERY)
    router = ReplyRouter(state, replies, locale="fr-FR")

    router.route(BrokerTelemetry(topic="HiAlfredData/led", payload=b"0"))

    sent = replies.texts[0]
    assert "éteinte" in sent.text
    assert [reply.title for reply in sent.quick_replies or []] == ["Oui", "Non"]


def test_telemetry_without_waiter_is_dropped(replies, caplog) -> None:
    caplog.set_level(logging.INFO)
    router = ReplyRouter(SessionState(), replies)

    router.route(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"18"))

    assert replies.texts == []
    assert "no_waiter" in caplog.text


def test_telemetry_for_other_kind_keeps_pending(replies) -> None:
    state = SessionState()
    state.begin_pending("A", RequestKind.LED_STATUS_QUERY)
    router = ReplyRouter(state, replies)

    router.route(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"18"))

    assert replies.texts == []
    assert state.peek_pending() is not None


def test_malformed_temperature_keeps_pending(replies) -> None:
    state = SessionState()
    state.begin_pending("A", RequestKind.TEMPERATURE_QUERY)
    router = ReplyRouter(state, replies)

    router.route(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"warm"))

    assert replies.texts == []
    assert state.resolve_pending(RequestKind.TEMPERATURE_QUERY) == "A"


def test_unknown_topic_is_ignored(replies) -> None:
    state = SessionState()
    state.begin_pending("A", RequestKind.TEMPERATURE_QUERY)

    ReplyRouter(state, replies).route(BrokerTelemetry(topic="HiAlfredData/humidity", payload=b"40"))

    assert replies.texts == []
    assert state.peek_pending() is not None


def test_reply_failure_is_logged_not_raised(caplog) -> None:
    class _BrokenSink:
        def send_text(self, recipient_id, text, quick_replies=None):
            raise RuntimeError("graph down")

        def send_sender_action(self, recipient_id, action):
            raise AssertionError("unexpected")

    state = SessionState()
    state.begin_pending("A", RequestKind.TEMPERATURE_QUERY)

    ReplyRouter(state, _BrokenSink()).route(BrokerTelemetry(topic="HiAlfredData/tmp", payload=b"20"))

    assert "reply failed" in caplog.text


def test_decode_payload_validation() -> None:
    assert decode_payload(b" 21.5 ", kind="tmp") == "21.5"
    assert decode_payload("1", kind="led") == "1"
    with pytest.raises(TelemetryPayloadError):
        decode_payload(b"", kind="led")
    with pytest.raises(TelemetryPayloadError):
        decode_payload(b"\xff\xfe", kind="tmp")
