"""Testes da rota de webhook de compras."""

from __future__ import annotations

import hashlib
import hmac
import json
from types import SimpleNamespace

import pytest
from starlette.requests import Request

from api.routes.webhook import router as webhook
from app.bootstrap import create_gateway
from app.observability import MetricsRecorder
from app.services import RateLimiter
from config.settings import WebhookSettings

SECRET = "shh"


def _build_request(
    *,
    state: SimpleNamespace,
    body: bytes = b"",
    headers: dict[str, str] | None = None,
) -> Request:
    header_items = headers or {}
    raw_headers = [(k.lower().encode("utf-8"), v.encode("utf-8")) for k, v in header_items.items()]
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "path": "/webhook/kajabi",
        "raw_path": b"/webhook/kajabi",
        "query_string": b"",
        "headers": raw_headers,
        "app": SimpleNamespace(state=state),
    }
    sent = False

    async def _receive() -> dict[str, object]:
        nonlocal sent
        if sent:
            return {"type": "http.request", "body": b"", "more_body": False}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, _receive)


def _state(*, secret: str = SECRET, strict: bool = True, handler=None) -> SimpleNamespace:
    gateway = create_gateway(
        rate_limiter=RateLimiter(),
        metrics=MetricsRecorder(),
        webhook_settings=WebhookSettings(secret=secret, require_verification=strict),
    )
    return SimpleNamespace(gateway=gateway, webhook_handler=handler)


def _sign(body: bytes) -> str:
    return hmac.new(SECRET.encode(), body, hashlib.sha256).hexdigest()


@pytest.mark.asyncio
async def test_signed_webhook_is_acknowledged() -> None:
    body = b'{"a":1}'
    state = _state()

    response = await webhook.receive_webhook(
        _build_request(
            state=state,
            body=body,
            headers={"X-Webhook-Signature": _sign(body), "X-Request-ID": "req-1"},
        )
    )
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload == {"status": "received", "trace_id": "req-1"}
    assert response.headers["x-request-id"] == "req-1"
    assert state.gateway.metrics.query("webhook.kajabi").count == 1


@pytest.mark.asyncio
async def test_tampered_signature_is_rejected() -> None:
    body = b'{"a":1}'
    signature = _sign(body)
    tampered = signature[:-1] + ("0" if signature[-1] != "0" else "1")

    response = await webhook.receive_webhook(
        _build_request(state=_state(), body=body, headers={"X-Webhook-Signature": tampered})
    )

    assert response.status_code == 401
    assert json.loads(response.body) == {"error": "Invalid webhook signature"}
    assert response.headers["x-request-id"]


@pytest.mark.asyncio
async def test_missing_signature_strict_is_rejected() -> None:
    response = await webhook.receive_webhook(_build_request(state=_state(), body=b"{}"))

    assert response.status_code == 401
    assert json.loads(response.body) == {"error": "Missing webhook signature"}


@pytest.mark.asyncio
async def test_strict_mode_without_secret_fails_closed() -> None:
    response = await webhook.receive_webhook(
        _build_request(state=_state(secret=""), body=b"{}")
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {"error": "Webhook verification not configured"}


@pytest.mark.asyncio
async def test_invalid_json_returns_400() -> None:
    body = b"not-json"

    response = await webhook.receive_webhook(
        _build_request(state=_state(), body=body, headers={"X-Signature": _sign(body)})
    )

    assert response.status_code == 400
    assert json.loads(response.body) == {"error": "Invalid JSON payload"}


@pytest.mark.asyncio
async def test_injected_handler_failure_is_classified() -> None:
    body = b'{"email":"x@example.com"}'

    async def handler(payload: dict) -> dict:
        raise RuntimeError("supabase insert failed")

    response = await webhook.receive_webhook(
        _build_request(
            state=_state(handler=handler), body=body, headers={"X-Signature": _sign(body)}
        )
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {
        "error": "❌ Database error occurred. Please try again later."
    }
