"""Política de verificação de assinatura de webhooks.

Decide, a partir da configuração e dos headers, se o webhook segue para o
handler. A verificação criptográfica em si fica em app/infra/crypto.

| secret   | strict | assinatura | resultado                        |
|----------|--------|------------|----------------------------------|
| ausente  | não    | qualquer   | skipped (warning), segue         |
| ausente  | sim    | qualquer   | misconfigured, 500               |
| presente | sim    | ausente    | rejected, 401                    |
| presente | não    | ausente    | skipped (warning), segue         |
| presente | -      | inválida   | rejected, 401                    |
| presente | -      | válida     | verified, segue                  |
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from app.infra.crypto import extract_signature, verify_signature
from config.logging import log_degraded

if TYPE_CHECKING:
    from collections.abc import Mapping

    from config.settings import WebhookSettings

logger = logging.getLogger(__name__)

VerdictOutcome = Literal["verified", "skipped", "rejected", "misconfigured"]

# Substrings usadas apenas para diagnóstico quando a assinatura não chega
_DIAGNOSTIC_HEADER_HINTS = ("signature", "kajabi", "webhook")


@dataclass(frozen=True, slots=True)
class WebhookVerdict:
    """Decisão da política de assinatura."""

    outcome: VerdictOutcome
    status_code: int
    reason: str
    message: str = ""

    @property
    def proceed(self) -> bool:
        return self.outcome in ("verified", "skipped")


VERIFIED = WebhookVerdict("verified", 200, "signature_valid")


def evaluate_webhook_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    settings: WebhookSettings,
) -> WebhookVerdict:
    """Aplica a política de assinatura a um webhook recebido.

    Args:
        raw_body: Corpo bruto, exatamente como recebido.
        headers: Headers recebidos.
        settings: Secret e modo estrito.

    Returns:
        WebhookVerdict; `proceed` indica se o handler deve rodar.
    """
    if not settings.secret:
        if settings.require_verification:
            logger.error(
                "webhook_secret_not_configured",
                extra={"component": "webhook_verification", "strict": True},
            )
            return WebhookVerdict(
                "misconfigured",
                500,
                "secret_not_configured",
                "Webhook verification not configured",
            )
        log_degraded(logger, "webhook_verification", "secret_not_configured")
        return WebhookVerdict("skipped", 200, "secret_not_configured")

    signature = extract_signature(headers)
    if signature is None:
        if settings.require_verification:
            logger.warning(
                "webhook_signature_missing",
                extra={"component": "webhook_verification", "strict": True},
            )
            return WebhookVerdict(
                "rejected", 401, "signature_missing", "Missing webhook signature"
            )
        log_degraded(
            logger,
            "webhook_verification",
            "signature_missing",
            candidate_headers=_candidate_header_names(headers),
        )
        return WebhookVerdict("skipped", 200, "signature_missing")

    if not verify_signature(raw_body, signature, settings.secret):
        logger.warning(
            "webhook_signature_invalid",
            extra={
                "component": "webhook_verification",
                "signature_prefix": signature[:20],
                "payload_size": len(raw_body),
            },
        )
        return WebhookVerdict(
            "rejected", 401, "signature_invalid", "Invalid webhook signature"
        )

    logger.info(
        "webhook_signature_verified",
        extra={"component": "webhook_verification", "payload_size": len(raw_body)},
    )
    return VERIFIED


def _candidate_header_names(headers: Mapping[str, str]) -> list[str]:
    """Nomes (nunca valores) de headers que parecem carregar assinatura."""
    return sorted(
        name.lower()
        for name in headers
        if any(hint in name.lower() for hint in _DIAGNOSTIC_HEADER_HINTS)
    )
