"""Webhook receiver."""

import hashlib
import hmac

from fastapi import FastAPI, HTTPException, Request
from pydantic import ValidationError

from gh import GitHubClient

from .config import Settings
from .engine import handle_push
from .exceptions import WebhookSignatureError
from .log import get_logger
from .models import PushEvent

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"


def sign(secret: str, body: bytes) -> str:
    """Signature GitHub sends for ``body``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(secret: str, body: bytes, signature: str | None) -> None:
    """
    Check a delivery's ``X-Hub-Signature-256`` header.

    Raises:
        WebhookSignatureError: Header missing or not matching the body
    """
    if not signature:
        raise WebhookSignatureError(f"Missing {SIGNATURE_HEADER} header")
    if not hmac.compare_digest(sign(secret, body), signature):
        raise WebhookSignatureError("Signature does not match payload")


def create_app(settings: Settings, client: GitHubClient | None = None) -> FastAPI:
    """
    Create the webhook application.

    Args:
        settings: Process settings
        client: GitHub client to use (built from settings when omitted)
    """
    app = FastAPI(title="sporkfed")
    app.state.settings = settings
    app.state.client = client or settings.create_client()
    if not settings.webhook_secret:
        logger.warning("webhook_secret_missing")

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok"}

    @app.post("/webhook")
    async def webhook(request: Request) -> dict:
        body = await request.body()
        if settings.webhook_secret:
            try:
                verify_signature(settings.webhook_secret, body, request.headers.get(SIGNATURE_HEADER))
            except WebhookSignatureError as e:
                logger.warning(
                    "webhook_signature_error", delivery=request.headers.get(DELIVERY_HEADER), err=str(e)
                )
                raise HTTPException(status_code=401, detail=str(e)) from e

        event_name = request.headers.get(EVENT_HEADER, "")
        logger.info(
            "webhook_delivery", delivery=request.headers.get(DELIVERY_HEADER), github_event=event_name
        )
        if event_name == "ping":
            return {"status": "pong"}
        if event_name != "push":
            return {"status": "ignored", "event": event_name}

        try:
            event = PushEvent.model_validate_json(body)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail="Malformed push payload") from e

        results = await handle_push(app.state.client, event, settings.config_path)
        return {
            "status": "processed",
            "rules": [
                {
                    "rule": result.rule.describe(),
                    "outcome": result.outcome.value,
                    "target_path": result.target_path,
                    "pull_request": result.pull_request.html_url if result.pull_request else None,
                }
                for result in results
            ],
        }

    return app
