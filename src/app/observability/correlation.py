"""Gerenciamento de trace_id para rastreamento de requisições.

O trace_id é lido do header X-Request-ID (ou gerado), fica visível para todo
código chamado dentro do escopo da requisição e é injetado em logs.
Usa ContextVar: o valor acompanha o grafo lógico de chamadas (inclusive
através de `await` e de tasks filhas), nunca vaza entre requisições
concorrentes.

Uso:
    from app.observability import trace_context, get_trace_id

    # Na borda de entrada
    with trace_context(request.headers.get("x-request-id")) as trace_id:
        await handler()

    # Em qualquer lugar
    trace_id = get_trace_id()
"""

from __future__ import annotations

import secrets
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator, Mapping

T = TypeVar("T")

REQUEST_ID_HEADER = "X-Request-ID"

# Tamanho máximo aceito para um trace_id vindo de upstream
MAX_INBOUND_TRACE_ID_LENGTH = 128

_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)


def generate_trace_id() -> str:
    """Gera um novo trace_id (32 caracteres hex, 128 bits aleatórios)."""
    return secrets.token_hex(16)


def get_trace_id() -> str | None:
    """Retorna o trace_id do escopo atual, ou None fora de um escopo."""
    return _trace_id.get()


def set_trace_id(trace_id: str | None = None) -> Token[str | None]:
    """Define o trace_id no contexto atual.

    Prefira `trace_context`; use esta função apenas quando o reset precisa
    acontecer em outro ponto (ex: middleware ASGI).

    Args:
        trace_id: ID a definir. Se None, gera um novo.

    Returns:
        Token para reset posterior via reset_trace_id().
    """
    return _trace_id.set(trace_id or generate_trace_id())


def reset_trace_id(token: Token[str | None]) -> None:
    """Restaura o trace_id ao valor anterior."""
    _trace_id.reset(token)


@contextmanager
def trace_context(trace_id: str | None = None) -> Iterator[str]:
    """Vincula um trace_id durante a extensão dinâmica do bloco.

    Args:
        trace_id: ID herdado de upstream. Se None/vazio, gera um novo.

    Yields:
        O trace_id efetivamente vinculado.
    """
    value = trace_id or generate_trace_id()
    token = _trace_id.set(value)
    try:
        yield value
    finally:
        _trace_id.reset(token)


async def run_with_trace_id(
    trace_id: str | None,
    body: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Executa `body` (async) com o trace_id vinculado ao escopo."""
    with trace_context(trace_id):
        return await body(*args, **kwargs)


def run_with_trace_id_sync(
    trace_id: str | None,
    body: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Versão síncrona de `run_with_trace_id`."""
    with trace_context(trace_id):
        return body(*args, **kwargs)


def normalize_inbound_trace_id(value: str | None) -> str | None:
    """Valida trace_id recebido de upstream.

    Aceita apenas valores não vazios, imprimíveis e com até
    MAX_INBOUND_TRACE_ID_LENGTH caracteres; caso contrário retorna None.
    """
    if value is None:
        return None
    candidate = value.strip()
    if not candidate or len(candidate) > MAX_INBOUND_TRACE_ID_LENGTH:
        return None
    if not candidate.isprintable():
        return None
    return candidate


def resolve_trace_id(headers: Mapping[str, str]) -> str:
    """Reusa o X-Request-ID de upstream (se válido) ou gera um novo."""
    inbound = None
    for name, value in headers.items():
        if name.lower() == REQUEST_ID_HEADER.lower():
            inbound = value
            break
    return normalize_inbound_trace_id(inbound) or generate_trace_id()
