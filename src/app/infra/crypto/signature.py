"""Validação de assinatura HMAC-SHA256 para webhooks.

Suporta os dialetos de header mais comuns (Kajabi, GitHub/Meta e genéricos),
sem que o chamador precise saber qual deles o provedor usa.

A comparação é feita sobre os bytes decodificados do hex, com
`hmac.compare_digest` (tempo constante). Por isso o hex recebido é aceito
em maiúsculas ou minúsculas. Fora isso o formato é estrito: exatamente 64
dígitos hex, sem espaços ou separadores.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import logging
import string
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

# Ordem de precedência quando mais de um header está presente
SIGNATURE_HEADERS: tuple[str, ...] = (
    "x-webhook-signature",
    "x-kajabi-signature",
    "x-signature",
    "x-hub-signature-256",
)

SIGNATURE_PREFIX = "sha256="

# SHA-256 em hex: exatamente 64 dígitos, sem separadores
SIGNATURE_HEX_LENGTH = hashlib.sha256().digest_size * 2
_HEX_DIGITS = frozenset(string.hexdigits)


def extract_signature(
    headers: Mapping[str, str | Sequence[str]],
    header_names: Sequence[str] = SIGNATURE_HEADERS,
) -> str | None:
    """Retorna o valor do primeiro header de assinatura presente.

    Busca case-insensitive. Headers multivalorados usam o primeiro valor.

    Args:
        headers: Headers recebidos.
        header_names: Nomes reconhecidos, em ordem de precedência.

    Returns:
        Valor da assinatura ou None se nenhum header reconhecido existir.
    """
    normalized = {name.lower(): value for name, value in headers.items()}
    for name in header_names:
        value = normalized.get(name.lower())
        if value is not None and not isinstance(value, str):
            value = value[0] if value else None
        if value:
            return value
    return None


def compute_signature(payload: bytes | str, secret: str) -> str:
    """Calcula o HMAC-SHA256 (hex minúsculo) do payload."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def strip_signature_prefix(signature: str) -> str:
    """Remove o prefixo `sha256=` (se presente) e espaços laterais."""
    value = signature.strip()
    if value[: len(SIGNATURE_PREFIX)].lower() == SIGNATURE_PREFIX:
        return value[len(SIGNATURE_PREFIX) :]
    return value


def verify_signature(
    payload: bytes | str,
    signature: str | None,
    secret: str | None,
) -> bool:
    """Valida assinatura HMAC-SHA256 do payload bruto.

    Args:
        payload: Corpo bruto da requisição (exatamente como recebido).
        signature: Valor do header, com ou sem prefixo `sha256=`.
        secret: Secret compartilhado com o provedor.

    Returns:
        True se a assinatura for válida. Hex malformado, valores vazios
        ou tamanho divergente retornam False (nunca levanta).
    """
    if not signature or not secret:
        return False

    candidate = strip_signature_prefix(signature)
    if len(candidate) != SIGNATURE_HEX_LENGTH or not set(candidate) <= _HEX_DIGITS:
        logger.debug("webhook_signature_malformed", extra={"reason": "invalid_hex"})
        return False

    provided = bytes.fromhex(candidate)
    expected = binascii.unhexlify(compute_signature(payload, secret))
    return hmac.compare_digest(provided, expected)
