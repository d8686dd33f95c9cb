from __future__ import annotations

from typing import Protocol, Sequence

from alfred.agent.io.contracts import BrokerCommand, QuickReply, SenderAction


class ReplySink(Protocol):
    def send_text(
        self,
        recipient_id: str,
        text: str,
        quick_replies: Sequence[QuickReply] | None = None,
    ) -> None:
        ...

    def send_sender_action(self, recipient_id: str, action: SenderAction) -> None:
        ...


class CommandPublisher(Protocol):
    def publish(self, command: BrokerCommand) -> None:
        ...
