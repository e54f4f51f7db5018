"""Protocolo do handler de negócio de webhooks."""

from __future__ import annotations

from typing import Any, Protocol


class WebhookHandlerProtocol(Protocol):
    """Recebe o payload já verificado e retorna o corpo da resposta.

    Falhas devem ser levantadas como exceção; o gateway classifica,
    loga e devolve uma mensagem genérica ao chamador.
    """

    async def __call__(self, payload: dict[str, Any]) -> dict[str, Any]: ...
