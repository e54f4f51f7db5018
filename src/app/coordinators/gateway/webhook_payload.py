"""Parse seguro do corpo do webhook (sem PII).

Executado somente depois da política de assinatura aprovar o request.
"""

from __future__ import annotations

import json
from typing import Any

from app.domain.errors import WebhookError


class InvalidJsonError(WebhookError):
    """JSON inválido no payload do webhook."""


def parse_webhook_body(raw_body: bytes) -> dict[str, Any]:
    """Parseia o corpo bruto do webhook como objeto JSON.

    Args:
        raw_body: Corpo bruto do request (já com assinatura verificada).

    Raises:
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto.

    Returns:
        Payload como dict.
    """
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload
