"""Messenger webhook payload normalization."""

from __future__ import annotations

from typing import Any

from alfred.agent.io.contracts import (
    AccountLinkingEvent,
    ChatEvent,
    DeliveryEvent,
    MessageEvent,
    OptinEvent,
    PostbackEvent,
    ReadEvent,
)
from alfred.agent.observability.log_manager import get_component_logger

logger = get_component_logger("io.messenger_channel")

PAGE_OBJECT = "page"


class WebhookPayloadError(ValueError):
    pass


def parse_webhook_payload(body: Any) -> list[ChatEvent]:
    """Return the chat events of a page subscription callback.

    Raises WebhookPayloadError when the body is not a page subscription.
    Individual malformed messaging events are logged and skipped.
    """
    if not isinstance(body, dict) or body.get("object") != PAGE_OBJECT:
        raise WebhookPayloadError("not a page subscription")
    entries = body.get("entry") if isinstance(body.get("entry"), list) else []
    events: list[ChatEvent] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        messaging = entry.get("messaging") if isinstance(entry.get("messaging"), list) else []
        for raw_event in messaging:
            event = normalize_messaging_event(raw_event)
            if event is not None:
                events.append(event)
    return events


def normalize_messaging_event(raw: Any) -> ChatEvent | None:
    if not isinstance(raw, dict):
        logger.warning("messaging event skipped status=malformed reason=not_an_object")
        return None
    sender = raw.get("sender") if isinstance(raw.get("sender"), dict) else {}
    sender_id = _as_optional_str(sender.get("id"))
    if not sender_id:
        logger.warning("messaging event skipped status=malformed reason=missing_sender")
        return None
    timestamp = _as_optional_int(raw.get("timestamp"))

    if isinstance(raw.get("optin"), dict):
        optin = raw["optin"]
        return OptinEvent(sender_id=sender_id, ref=_as_optional_str(optin.get("ref")), timestamp=timestamp)
    if isinstance(raw.get("message"), dict):
        return _normalize_message(sender_id, raw["message"], timestamp)
    if isinstance(raw.get("delivery"), dict):
        delivery = raw["delivery"]
        mids = delivery.get("mids") if isinstance(delivery.get("mids"), list) else []
        return DeliveryEvent(
            sender_id=sender_id,
            mids=tuple(str(mid) for mid in mids),
            watermark=_as_optional_int(delivery.get("watermark")),
        )
    if isinstance(raw.get("postback"), dict):
        postback = raw["postback"]
        payload = _as_optional_str(postback.get("payload"))
        if payload is None:
            logger.warning("postback skipped user_id=%s status=malformed reason=missing_payload", sender_id)
            return None
        return PostbackEvent(
            sender_id=sender_id,
            payload=payload,
            title=_as_optional_str(postback.get("title")),
            timestamp=timestamp,
        )
    if isinstance(raw.get("read"), dict):
        return ReadEvent(sender_id=sender_id, watermark=_as_optional_int(raw["read"].get("watermark")))
    if isinstance(raw.get("account_linking"), dict):
        linking = raw["account_linking"]
        return AccountLinkingEvent(
            sender_id=sender_id,
            status=_as_optional_str(linking.get("status")),
            authorization_code=_as_optional_str(linking.get("authorization_code")),
        )
    logger.warning("messaging event skipped user_id=%s status=unknown_event", sender_id)
    return None


def _normalize_message(sender_id: str, message: dict[str, Any], timestamp: int | None) -> MessageEvent:
    quick_reply = message.get("quick_reply") if isinstance(message.get("quick_reply"), dict) else {}
    attachments = message.get("attachments") if isinstance(message.get("attachments"), list) else []
    nlp = message.get("nlp") if isinstance(message.get("nlp"), dict) else {}
    entities = nlp.get("entities") if isinstance(nlp.get("entities"), dict) else {}
    text = message.get("text")
    return MessageEvent(
        sender_id=sender_id,
        text=str(text) if isinstance(text, str) else None,
        quick_reply_payload=_as_optional_str(quick_reply.get("payload")),
        attachments=tuple(item for item in attachments if isinstance(item, dict)),
        nlp_entities=dict(entities),
        is_echo=bool(message.get("is_echo")),
        message_id=_as_optional_str(message.get("mid")),
        timestamp=timestamp,
    )


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
