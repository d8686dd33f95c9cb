from __future__ import annotations

from alfred.agent.cognition.localization import render_message
from alfred.agent.io.adapters import ReplySink
from alfred.agent.io.contracts import BrokerTelemetry, QuickReply
from alfred.agent.observability.log_manager import get_component_logger
from alfred.agent.session.state import RequestKind, SessionState

logger = get_component_logger("actions.reply_router")

TEMPERATURE_SUFFIX = "tmp"
LED_SUFFIX = "led"

LED_SET_YES = "LED_SET_YES"
LED_SET_NO = "LED_SET_NO"


class TelemetryPayloadError(ValueError):
    pass


class ReplyRouter:
    """Turns device telemetry into a reply for the user waiting on it."""

    def __init__(self, session: SessionState, replies: ReplySink, *, locale: str = "en-US") -> None:
        self._session = session
        self._replies = replies
        self._locale = locale

    def route(self, telemetry: BrokerTelemetry) -> None:
        kind = telemetry.kind
        if kind not in {TEMPERATURE_SUFFIX, LED_SUFFIX}:
            logger.debug("telemetry ignored topic=%s", telemetry.topic)
            return
        try:
            value = decode_payload(telemetry.payload, kind=kind)
        except TelemetryPayloadError as exc:
            logger.warning(
                "telemetry dropped topic=%s status=malformed error=%s",
                telemetry.topic,
                exc,
            )
            return

        if kind == TEMPERATURE_SUFFIX:
            self._route_temperature(telemetry.topic, value)
        else:
            self._route_led(telemetry.topic, value)

    def _route_temperature(self, topic: str, value: str) -> None:
        user = self._session.resolve_pending(RequestKind.TEMPERATURE_QUERY)
        if user is None:
            logger.info("telemetry dropped topic=%s status=no_waiter", topic)
            return
        text = render_message("temperature_reading", self._locale, {"value": value})
        logger.info("telemetry resolved topic=%s user_id=%s", topic, user)
        self._send(user, text)

    def _route_led(self, topic: str, value: str) -> None:
        user = self._session.resolve_pending(RequestKind.LED_STATUS_QUERY)
        if user is None:
            logger.info("telemetry dropped topic=%s status=no_waiter", topic)
            return
        key = "led_status_off" if value == "0" else "led_status_on"
        quick_replies = [
            QuickReply(title=render_message("quick_reply_yes", self._locale), payload=LED_SET_YES),
            QuickReply(title=render_message("quick_reply_no", self._locale), payload=LED_SET_NO),
        ]
        logger.info("telemetry resolved topic=%s user_id=%s led=%s", topic, user, value)
        self._send(user, render_message(key, self._locale), quick_replies)

    def _send(self, user: str, text: str, quick_replies: list[QuickReply] | None = None) -> None:
        try:
            self._replies.send_text(user, text, quick_replies)
        except Exception as exc:
            logger.exception("reply failed user_id=%s", user, exc_info=exc)


def decode_payload(payload: bytes | str, *, kind: str) -> str:
    if isinstance(payload, (bytes, bytearray)):
        try:
            text = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TelemetryPayloadError("payload is not valid UTF-8") from exc
    else:
        text = str(payload)
    value = text.strip()
    if not value:
        raise TelemetryPayloadError("empty payload")
    if kind == TEMPERATURE_SUFFIX:
        try:
            float(value)
        except ValueError as exc:
            raise TelemetryPayloadError(f"temperature is not numeric value={value[:40]}") from exc
    return value
