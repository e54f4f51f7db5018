"""Limpeza periódica das entradas expiradas do rate limiter.

Roda como task asyncio independente do processamento de requisições,
iniciada e encerrada pelo lifespan da aplicação.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 300.0


class RateLimitSweeper:
    """Executa `RateLimiter.sweep()` em intervalo fixo.

    Args:
        limiter: Rate limiter a ser limpo.
        interval_seconds: Intervalo entre limpezas (padrão 5 minutos).
    """

    def __init__(
        self,
        limiter: RateLimiter,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds deve ser > 0")
        self._limiter = limiter
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Agenda a task de limpeza no event loop atual (idempotente)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="rate_limit_sweeper")
        logger.info(
            "rate_limit_sweeper_started",
            extra={"interval_seconds": self._interval_seconds},
        )

    async def stop(self) -> None:
        """Cancela a task e aguarda seu término."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("rate_limit_sweeper_stopped")

    def sweep_once(self) -> int:
        """Executa uma limpeza; falhas são logadas e não interrompem o loop."""
        try:
            return self._limiter.sweep()
        except Exception:
            logger.exception("rate_limit_sweep_failed")
            return 0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            self.sweep_once()
