"""Middleware de trace_id (X-Request-ID).

Reusa o X-Request-ID de upstream quando válido (continuidade com o
chamador) ou gera um novo; vincula o valor ao escopo da requisição e o
devolve no header da resposta.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from app.observability import REQUEST_ID_HEADER, resolve_trace_id, trace_context

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Vincula o trace_id a cada requisição HTTP."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        trace_id = resolve_trace_id(request.headers)
        request.state.trace_id = trace_id

        with trace_context(trace_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = trace_id
        return response
