"""Classificação de falhas na taxonomia fechada do gateway.

Erros com tag (`GatewayError`) mantêm sua categoria. Exceções sem tag,
vindas de colaboradores externos, passam por heurística de substrings na
mensagem; é um caminho de menor fidelidade, usado apenas como fallback.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from app.domain.errors import (
    ERROR_KIND_POLICIES,
    ClassifiedError,
    ErrorKind,
    GatewayError,
    ValidationError,
)
from app.observability import get_trace_id

if TYPE_CHECKING:
    from collections.abc import Mapping

# Ordem importa: primeira regra que casar define a categoria
_HEURISTIC_RULES: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (ErrorKind.DATABASE, ("database", "supabase")),
    (ErrorKind.RATE_LIMITED, ("rate limit", "429")),
    (ErrorKind.AUTH, ("permission", "unauthorized")),
    (ErrorKind.NOT_FOUND, ("not found",)),
)


def infer_kind(error: BaseException) -> ErrorKind:
    """Infere a categoria de uma exceção sem tag pela sua mensagem."""
    message = str(error).lower()
    for kind, needles in _HEURISTIC_RULES:
        if any(needle in message for needle in needles):
            return kind
    return ErrorKind.UNKNOWN


def user_message_for(kind: ErrorKind) -> str:
    """Mensagem genérica (sem detalhes internos) da categoria."""
    return ERROR_KIND_POLICIES[kind].user_message


def classify(
    error: BaseException | ClassifiedError,
    context: Mapping[str, Any] | None = None,
) -> ClassifiedError:
    """Mapeia qualquer falha para um `ClassifiedError`.

    Args:
        error: Exceção original.
        context: Contexto adicional (operação, usuário...). O trace_id do
            escopo atual é incluído automaticamente.

    Returns:
        ClassifiedError imutável. Se `error` já for um ClassifiedError,
        retorna o próprio objeto.
    """
    if isinstance(error, ClassifiedError):
        return error

    merged: dict[str, Any] = dict(context or {})

    if isinstance(error, GatewayError):
        kind = error.kind
        merged.update(error.details)
        if isinstance(error, ValidationError) and str(error):
            user_message = f"❌ {error}"
        else:
            user_message = user_message_for(kind)
    else:
        kind = infer_kind(error)
        user_message = user_message_for(kind)

    trace_id = get_trace_id()
    if trace_id:
        merged["trace_id"] = trace_id
    merged["error_kind"] = kind.value
    merged["error_type"] = type(error).__name__

    return ClassifiedError(
        kind=kind,
        user_message=user_message,
        cause=error,
        context=MappingProxyType(merged),
    )
