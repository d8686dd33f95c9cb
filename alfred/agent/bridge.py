"""Chat/broker correlation bridge.

One chat turn runs classification and every session mutation inside the
session transaction, then performs I/O (broker publish, replies) outside of
it. Telemetry is handed to the reply router, which owns resolution of the
pending slot.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from alfred.agent.actions.command_encoder import CommandTopics, encode
from alfred.agent.actions.reply_router import ReplyRouter
from alfred.agent.cognition.intent_classifier import classify
from alfred.agent.cognition.intent_types import AcknowledgementKind, Intent, IntentKind
from alfred.agent.cognition.localization import render_message
from alfred.agent.io.adapters import CommandPublisher, ReplySink
from alfred.agent.io.contracts import (
    AccountLinkingEvent,
    BrokerCommand,
    BrokerTelemetry,
    ChatEvent,
    DeliveryEvent,
    MessageEvent,
    ReadEvent,
    SenderAction,
)
from alfred.agent.observability.log_manager import get_component_logger
from alfred.agent.session.state import RequestKind, SessionState

logger = get_component_logger("bridge")

_PENDING_KINDS: dict[IntentKind, RequestKind] = {
    IntentKind.QUERY_TEMPERATURE: RequestKind.TEMPERATURE_QUERY,
    IntentKind.QUERY_LED_STATUS: RequestKind.LED_STATUS_QUERY,
}

_ACK_KEYS: dict[IntentKind, str] = {
    IntentKind.GREET: "greeting",
    IntentKind.RAISE_TEMPERATURE: "raise_temperature_ack",
    IntentKind.LOWER_TEMPERATURE: "lower_temperature_ack",
    IntentKind.CONFIRM_LED_TOGGLE: "led_toggle_done",
    IntentKind.DECLINE_LED_TOGGLE: "led_toggle_declined",
    IntentKind.REQUEST_TEMPERATURE_VALUE: "temperature_value_prompt",
    IntentKind.SET_TEMPERATURE: "set_temperature_ack",
}

_ACKNOWLEDGEMENT_KEYS: dict[AcknowledgementKind, str] = {
    AcknowledgementKind.ATTACHMENT: "attachment_received",
    AcknowledgementKind.AUTHENTICATION: "authentication_successful",
}


@dataclass(frozen=True)
class TurnOutcome:
    intent: Intent | None
    command: BrokerCommand | None = None
    reply_text: str | None = None
    typing: bool = False


@dataclass
class ChatBridge:
    session: SessionState
    publisher: CommandPublisher
    replies: ReplySink
    topics: CommandTopics = field(default_factory=CommandTopics)
    locale: str = "en-US"

    def __post_init__(self) -> None:
        self._router = ReplyRouter(self.session, self.replies, locale=self.locale)

    def handle_chat_event(self, event: ChatEvent) -> TurnOutcome:
        sender_id = event.sender_id
        with self.session.transaction():
            classification = classify(event, self.session.is_awaiting_value())
            if classification.clear_awaiting:
                self.session.set_awaiting_value(False)
            intent = classification.intent
            if intent is None:
                _log_passive_event(event)
                return TurnOutcome(intent=None)
            pending_kind = _PENDING_KINDS.get(intent.kind)
            if pending_kind is not None:
                # Registered ahead of the publish so a fast device reply finds its waiter.
                self.session.begin_pending(sender_id, pending_kind)
            if intent.kind == IntentKind.REQUEST_TEMPERATURE_VALUE:
                self.session.set_awaiting_value(True)

        outcome = TurnOutcome(
            intent=intent,
            command=encode(intent, self.topics),
            reply_text=None if pending_kind is not None else self._reply_text(intent),
            typing=pending_kind is not None,
        )
        logger.info(
            "chat turn user_id=%s intent=%s command=%s",
            sender_id,
            intent.kind.value,
            outcome.command.topic if outcome.command else None,
        )
        self._perform(sender_id, outcome)
        return outcome

    def handle_telemetry(self, telemetry: BrokerTelemetry) -> None:
        try:
            self._router.route(telemetry)
        except Exception as exc:
            logger.exception("telemetry routing failed topic=%s", telemetry.topic, exc_info=exc)

    def _reply_text(self, intent: Intent) -> str | None:
        if intent.kind in {IntentKind.ECHO, IntentKind.UNRECOGNIZED}:
            return intent.text
        if intent.kind == IntentKind.ACKNOWLEDGE and intent.acknowledgement is not None:
            return render_message(_ACKNOWLEDGEMENT_KEYS[intent.acknowledgement], self.locale)
        key = _ACK_KEYS.get(intent.kind)
        if key is None:
            return None
        return render_message(key, self.locale, {"value": intent.value or ""})

    def _perform(self, sender_id: str, outcome: TurnOutcome) -> None:
        if outcome.command is not None:
            try:
                self.publisher.publish(outcome.command)
            except Exception as exc:
                logger.exception(
                    "publish failed user_id=%s topic=%s",
                    sender_id,
                    outcome.command.topic,
                    exc_info=exc,
                )
        try:
            if outcome.typing:
                self.replies.send_sender_action(sender_id, SenderAction.TYPING_ON)
            elif outcome.reply_text:
                self.replies.send_text(sender_id, outcome.reply_text)
        except Exception as exc:
            logger.exception("reply failed user_id=%s", sender_id, exc_info=exc)


def _log_passive_event(event: ChatEvent) -> None:
    if isinstance(event, DeliveryEvent):
        logger.info(
            "delivery confirmed user_id=%s messages=%s watermark=%s",
            event.sender_id,
            len(event.mids),
            event.watermark,
        )
    elif isinstance(event, ReadEvent):
        logger.info("messages read user_id=%s watermark=%s", event.sender_id, event.watermark)
    elif isinstance(event, AccountLinkingEvent):
        logger.info(
            "account linking user_id=%s status=%s",
            event.sender_id,
            event.status,
        )
    elif isinstance(event, MessageEvent) and event.is_echo:
        logger.debug("message echo ignored user_id=%s", event.sender_id)
    else:
        logger.info("chat event ignored user_id=%s", event.sender_id)
