from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from alfred.agent.io.contracts import QuickReply, SenderAction
from alfred.integrations.messenger.config import MessengerConfig

logger = logging.getLogger(__name__)
_SNIPPET_LIMIT = 200


class MessengerSendError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, error: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error


class MessengerSendClient:
    """Send API client; one POST per call, no retries."""

    def __init__(self, config: MessengerConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def send_text(
        self,
        recipient_id: str,
        text: str,
        quick_replies: Sequence[QuickReply] | None = None,
    ) -> dict[str, Any]:
        message: dict[str, Any] = {"text": text}
        if quick_replies:
            message["quick_replies"] = [reply.as_payload() for reply in quick_replies]
        return self.call_send_api({"recipient": {"id": recipient_id}, "message": message})

    def send_sender_action(self, recipient_id: str, action: SenderAction) -> dict[str, Any]:
        return self.call_send_api(
            {"recipient": {"id": recipient_id}, "sender_action": SenderAction(action).value}
        )

    def call_send_api(self, message_data: dict[str, Any]) -> dict[str, Any]:
        recipient = (message_data.get("recipient") or {}).get("id")
        try:
            response = self._session.post(
                self._config.graph_api_url,
                params={"access_token": self._config.page_access_token},
                json=message_data,
                timeout=self._config.request_timeout_sec,
            )
        except requests.RequestException as exc:
            raise MessengerSendError(f"Send API transport failed: {exc}") from exc

        body = _json_body(response)
        if response.status_code != 200:
            error = body.get("error") if isinstance(body, dict) else None
            raise MessengerSendError(
                f"Failed calling Send API status={response.status_code} "
                f"reason={response.reason} body={response.text[:_SNIPPET_LIMIT]}",
                status_code=response.status_code,
                error=error,
            )

        message_id = body.get("message_id")
        if message_id:
            logger.info(
                "Successfully sent message with id %s to recipient %s",
                message_id,
                body.get("recipient_id") or recipient,
            )
        else:
            logger.info(
                "Successfully called Send API for recipient %s",
                body.get("recipient_id") or recipient,
            )
        return body


def _json_body(response: requests.Response) -> dict[str, Any]:
    try:
        parsed = response.json()
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}
