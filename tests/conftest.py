from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterator, Sequence

import pytest

from alfred.agent.io.contracts import BrokerCommand, QuickReply, SenderAction
from alfred.infrastructure.api_gateway import gateway

_ENV_PREFIXES = ("MESSENGER_", "MQTT_", "ALFRED_")
_ENV_KEYS = ("SERVER_URL", "PORT")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES) or key in _ENV_KEYS:
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_gateway() -> Iterator[None]:
    gateway.reset()
    yield
    gateway.reset()


@dataclass
class SentText:
    recipient_id: str
    text: str
    quick_replies: list[QuickReply] | None = None


@dataclass
class FakeReplySink:
    texts: list[SentText] = field(default_factory=list)
    actions: list[tuple[str, SenderAction]] = field(default_factory=list)

    def send_text(
        self,
        recipient_id: str,
        text: str,
        quick_replies: Sequence[QuickReply] | None = None,
    ) -> None:
        self.texts.append(
            SentText(recipient_id, text, list(quick_replies) if quick_replies else None)
        )

    def send_sender_action(self, recipient_id: str, action: SenderAction) -> None:
        self.actions.append((recipient_id, action))


@dataclass
class FakePublisher:
    published: list[BrokerCommand] = field(default_factory=list)
    fail_with: Exception | None = None

    def publish(self, command: BrokerCommand) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append(command)


@pytest.fixture
def replies() -> FakeReplySink:
    return FakeReplySink()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()
