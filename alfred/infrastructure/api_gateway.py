from __future__ import annotations

from dataclasses import dataclass

from alfred.agent.bridge import ChatBridge
from alfred.config import settings
from alfred.integrations.messenger.config import MessengerConfig


@dataclass
class WebhookGateway:
    bridge: ChatBridge | None = None
    messenger: MessengerConfig | None = None
    auth_code: str = settings.DEFAULT_ACCOUNT_LINKING_AUTH_CODE

    def configure(
        self,
        bridge: ChatBridge,
        messenger: MessengerConfig,
        auth_code: str | None = None,
    ) -> None:
        self.bridge = bridge
        self.messenger = messenger
        if auth_code:
            self.auth_code = auth_code

    def reset(self) -> None:
        self.bridge = None
        self.messenger = None
        self.auth_code = settings.DEFAULT_ACCOUNT_LINKING_AUTH_CODE

    @property
    def ready(self) -> bool:
        return self.bridge is not None and self.messenger is not None


gateway = WebhookGateway()
