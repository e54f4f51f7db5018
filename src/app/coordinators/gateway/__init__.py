"""Coordinator do gateway de ingress (webhooks e comandos do bot)."""

from app.coordinators.gateway.dispatcher import (
    DispatchOutcome,
    GatewayDispatcher,
    WebhookResult,
)
from app.coordinators.gateway.replies import (
    deliver_reply,
    format_rate_limit_message,
    send_interaction_reply,
)
from app.coordinators.gateway.webhook_payload import InvalidJsonError, parse_webhook_body
from app.coordinators.gateway.webhook_policy import (
    WebhookVerdict,
    evaluate_webhook_signature,
)

__all__ = [
    "DispatchOutcome",
    "GatewayDispatcher",
    "InvalidJsonError",
    "WebhookResult",
    "WebhookVerdict",
    "deliver_reply",
    "evaluate_webhook_signature",
    "format_rate_limit_message",
    "parse_webhook_body",
    "send_interaction_reply",
]
