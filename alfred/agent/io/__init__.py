from alfred.agent.io.contracts import (
    AccountLinkingEvent,
    BrokerCommand,
    BrokerTelemetry,
    ChatEvent,
    DeliveryEvent,
    MessageEvent,
    OptinEvent,
    PostbackEvent,
    QuickReply,
    ReadEvent,
    SenderAction,
)
from alfred.agent.io.adapters import CommandPublisher, ReplySink

__all__ = [
    "AccountLinkingEvent",
    "BrokerCommand",
    "BrokerTelemetry",
    "ChatEvent",
    "CommandPublisher",
    "DeliveryEvent",
    "MessageEvent",
    "OptinEvent",
    "PostbackEvent",
    "QuickReply",
    "ReadEvent",
    "ReplySink",
    "SenderAction",
]
