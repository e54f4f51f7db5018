"""Endpoint de webhook de compras (Kajabi e provedores compatíveis).

Endpoints:
- POST /webhook/kajabi: recebimento de eventos

Segurança:
- Assinatura HMAC verificada antes de qualquer handler (ver
  app/coordinators/gateway/webhook_policy.py)
- Corpo bruto lido antes do parse para que o HMAC cubra os bytes recebidos
- Resposta sempre carrega X-Request-ID
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.observability import REQUEST_ID_HEADER, get_trace_id

logger = logging.getLogger(__name__)

router = APIRouter()


async def acknowledge_webhook(payload: dict[str, Any]) -> dict[str, Any]:
    """Handler padrão: apenas confirma o recebimento.

    O processamento de negócio (pending joins, e-mail de convite) é
    injetado via `app.state.webhook_handler`.
    """
    logger.info("webhook_acknowledged", extra={"payload_keys": sorted(payload)})
    return {"status": "received", "trace_id": get_trace_id()}


@router.post("/kajabi", response_model=None)
async def receive_webhook(request: Request) -> JSONResponse:
    """Recebimento de webhook de compra.

    Returns:
        Resposta do handler (200) ou erro: 401 assinatura ausente/inválida,
        500 verificação obrigatória sem secret, 400 JSON inválido.
    """
    gateway = request.app.state.gateway
    handler = getattr(request.app.state, "webhook_handler", None) or acknowledge_webhook

    raw_body = await request.body()
    result = await gateway.dispatch_webhook(
        raw_body,
        dict(request.headers),
        handler,
        operation="webhook.kajabi",
    )

    logger.info(
        "webhook_processed",
        extra={
            "status_code": result.status_code,
            "signature_outcome": result.verdict.outcome if result.verdict else None,
            "payload_size": len(raw_body),
        },
    )

    return JSONResponse(
        content=result.body,
        status_code=result.status_code,
        headers={REQUEST_ID_HEADER: result.trace_id, **result.headers},
    )
