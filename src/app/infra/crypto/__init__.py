"""Módulo de criptografia do gateway.

Verificação HMAC-SHA256 de webhooks (comparação em tempo constante).

Localizado em app/infra/ para manter boundaries corretas:
- app/ não importa de api/ (exceto via bootstrap)
- Este módulo pode ser usado por coordinators em app/
"""

from .signature import (
    SIGNATURE_HEADERS,
    SIGNATURE_PREFIX,
    compute_signature,
    extract_signature,
    strip_signature_prefix,
    verify_signature,
)

__all__ = [
    "SIGNATURE_HEADERS",
    "SIGNATURE_PREFIX",
    "compute_signature",
    "extract_signature",
    "strip_signature_prefix",
    "verify_signature",
]
