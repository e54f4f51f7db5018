"""Filter de logging que carimba cada record com o trace da requisição.

O trace_id vem do escopo ambiente (ContextVar em app/observability), lido
no momento da emissão; config/ não importa app/, então a leitura é injetada
como callable no bootstrap.

Fora de um escopo de requisição (startup, tasks de manutenção) o campo fica
None: sai como `null` no JSON e é omitido na linha colorida.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def _no_trace() -> str | None:
    return None


class TraceIdFilter(logging.Filter):
    """Carimba `trace_id` e `service` em cada record.

    Um `trace_id` passado explicitamente via `extra` (ex: contexto de um
    ClassifiedError) prevalece sobre o do escopo atual.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        trace_id_getter: Leitura do trace_id do escopo atual.
    """

    def __init__(
        self,
        service_name: str,
        trace_id_getter: Callable[[], str | None] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._current_trace_id = trace_id_getter or _no_trace

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "trace_id", None) is None:
            record.trace_id = self._current_trace_id()
        record.service = self._service_name
        return True
