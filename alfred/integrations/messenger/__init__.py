from alfred.integrations.messenger.config import (
    MessengerConfig,
    MessengerConfigError,
    load_messenger_config,
)
from alfred.integrations.messenger.send_api import MessengerSendClient, MessengerSendError
from alfred.integrations.messenger.signature import (
    WebhookSignatureError,
    compute_signature,
    verify_signature,
)

__all__ = [
    "MessengerConfig",
    "MessengerConfigError",
    "MessengerSendClient",
    "MessengerSendError",
    "WebhookSignatureError",
    "compute_signature",
    "load_messenger_config",
    "verify_signature",
]
