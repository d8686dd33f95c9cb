from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class MessageEvent:
    sender_id: str
    text: str | None = None
    quick_reply_payload: str | None = None
    attachments: tuple[dict[str, Any], ...] = ()
    nlp_entities: dict[str, Any] = field(default_factory=dict)
    is_echo: bool = False
    message_id: str | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class PostbackEvent:
    sender_id: str
    payload: str
    title: str | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class OptinEvent:
    sender_id: str
    ref: str | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class DeliveryEvent:
    sender_id: str
    mids: tuple[str, ...] = ()
    watermark: int | None = None


@dataclass(frozen=True)
class ReadEvent:
    sender_id: str
    watermark: int | None = None


@dataclass(frozen=True)
class AccountLinkingEvent:
    sender_id: str
    status: str | None = None
    authorization_code: str | None = None


ChatEvent = Union[
    MessageEvent,
    PostbackEvent,
    OptinEvent,
    DeliveryEvent,
    ReadEvent,
    AccountLinkingEvent,
]


@dataclass(frozen=True)
class BrokerCommand:
    topic: str
    payload: str


@dataclass(frozen=True)
class BrokerTelemetry:
    topic: str
    payload: bytes

    @property
    def kind(self) -> str:
        return self.topic.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class QuickReply:
    title: str
    payload: str

    def as_payload(self) -> dict[str, str]:
        return {"content_type": "text", "title": self.title, "payload": self.payload}


class SenderAction(str, Enum):
    TYPING_ON = "typing_on"
    TYPING_OFF = "typing_off"
    MARK_SEEN = "mark_seen"
