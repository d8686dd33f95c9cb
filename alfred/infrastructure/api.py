from __future__ import annotations

import json
from pathlib import Path

from fastapi import FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from alfred.agent.io.messenger_channel import WebhookPayloadError, parse_webhook_payload
from alfred.agent.observability.log_manager import get_component_logger
from alfred.infrastructure.api_gateway import gateway
from alfred.integrations.messenger.config import MessengerConfig
from alfred.integrations.messenger.signature import WebhookSignatureError, verify_signature

logger = get_component_logger("infrastructure.api")

app = FastAPI(title="Hi Alfred Bridge", version="0.1.0")

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


class HealthStatus(BaseModel):
    status: str = "ok"
    pending: str | None = None
    awaiting_value: bool = False


@app.get("/health", response_model=HealthStatus)
def health() -> HealthStatus:
    pending = None
    awaiting_value = False
    if gateway.bridge is not None:
        record = gateway.bridge.session.peek_pending()
        pending = record.kind.value if record is not None else None
        awaiting_value = gateway.bridge.session.is_awaiting_value()
    return HealthStatus(pending=pending, awaiting_value=awaiting_value)


@app.get("/webhook", response_class=PlainTextResponse)
def verify_webhook(
    mode: str | None = Query(default=None, alias="hub.mode"),
    verify_token: str | None = Query(default=None, alias="hub.verify_token"),
    challenge: str | None = Query(default=None, alias="hub.challenge"),
) -> str:
    messenger = _require_messenger()
    if mode == "subscribe" and verify_token == messenger.validation_token:
        logger.info("webhook validated")
        return challenge or ""
    logger.error("webhook validation failed mode=%s", mode)
    raise HTTPException(status_code=403, detail="Failed validation")


@app.post("/webhook")
async def receive_webhook(
    request: Request,
    x_hub_signature: str | None = Header(default=None),
    x_hub_signature_256: str | None = Header(default=None),
) -> PlainTextResponse:
    messenger = _require_messenger()
    bridge = gateway.bridge
    raw_body = await request.body()
    _assert_signature(raw_body, x_hub_signature_256 or x_hub_signature, messenger)

    try:
        body = json.loads(raw_body or b"{}")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from exc
    try:
        events = parse_webhook_payload(body)
    except WebhookPayloadError as exc:
        logger.warning("webhook rejected error=%s", exc)
        raise HTTPException(status_code=404, detail="Not a page subscription") from exc

    for event in events:
        try:
            bridge.handle_chat_event(event)
        except Exception as exc:
            logger.exception("chat event failed user_id=%s", event.sender_id, exc_info=exc)
    return PlainTextResponse("EVENT_RECEIVED", status_code=200)


@app.get("/authorize", response_class=HTMLResponse)
def authorize(
    request: Request,
    account_linking_token: str = "",
    redirect_uri: str = "",
):
    redirect_uri_success = f"{redirect_uri}&authorization_code={gateway.auth_code}"
    return templates.TemplateResponse(
        request,
        "authorize.html",
        {
            "account_linking_token": account_linking_token,
            "redirect_uri": redirect_uri,
            "redirect_uri_success": redirect_uri_success,
        },
    )


def _require_messenger() -> MessengerConfig:
    if not gateway.ready or gateway.messenger is None:
        raise HTTPException(status_code=503, detail="Bridge not configured")
    return gateway.messenger


def _assert_signature(raw_body: bytes, header_value: str | None, messenger: MessengerConfig) -> None:
    if not header_value:
        if messenger.require_signature:
            logger.warning("webhook rejected error=missing_signature")
            raise HTTPException(status_code=403, detail="Missing request signature")
        logger.error("Couldn't validate the signature. header=missing")
        return
    try:
        verify_signature(raw_body, header_value, messenger.app_secret)
    except WebhookSignatureError as exc:
        logger.warning("webhook rejected error=%s", exc)
        raise HTTPException(status_code=403, detail="Invalid request signature") from exc
