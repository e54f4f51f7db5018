"""Rate limit de comandos por principal, com cooldown por operação.

Cada principal tem uma única entrada compartilhada por todos os seus
comandos: uma janela fixa de contagem (reinicia inteira ao expirar) e o
registro do último comando, usado para o cooldown.

Ordem de avaliação em `check`:
1. Sem entrada ou janela expirada: nova janela com contagem 1, permitido.
2. Mesmo comando do anterior dentro do cooldown: negado.
3. Janela esgotada: negado até o fim da janela.
4. Caso contrário: incrementa e permite.

O cooldown tem precedência sobre a contagem da janela.

Todo o check-and-mutate de uma chamada roda sob um único lock e sem
pontos de suspensão, tanto para threads quanto para o event loop.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_MAX_PER_WINDOW = 10
DEFAULT_WINDOW_MS = 60_000
DEFAULT_COOLDOWN_MS = 2_000

DenyReason = Literal["ok", "cooldown", "window_exhausted"]


def monotonic_ms() -> float:
    """Relógio monotônico em milissegundos."""
    return time.monotonic() * 1000


@dataclass(slots=True)
class RateLimitEntry:
    """Estado de rate limit de um principal (mutado in-place)."""

    principal_id: str
    window_count: int
    window_reset_at: float
    last_operation_name: str
    last_operation_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.window_reset_at


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    """Resultado de um check de rate limit."""

    allowed: bool
    retry_after_seconds: int | None = None
    reason: DenyReason = "ok"

    @classmethod
    def allow(cls) -> RateLimitDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, retry_after_seconds: int, reason: DenyReason) -> RateLimitDecision:
        return cls(allowed=False, retry_after_seconds=retry_after_seconds, reason=reason)


class RateLimiter:
    """Rate limiter em memória, por principal.

    Args:
        max_per_window: Comandos permitidos por janela.
        window_ms: Duração da janela em milissegundos.
        cooldown_ms: Espaço mínimo entre duas execuções do mesmo comando.
        clock: Relógio em milissegundos (injetável em testes).
    """

    def __init__(
        self,
        *,
        max_per_window: int = DEFAULT_MAX_PER_WINDOW,
        window_ms: float = DEFAULT_WINDOW_MS,
        cooldown_ms: float = DEFAULT_COOLDOWN_MS,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        if max_per_window < 1:
            raise ValueError("max_per_window deve ser >= 1")
        if window_ms <= 0:
            raise ValueError("window_ms deve ser > 0")
        if cooldown_ms < 0:
            raise ValueError("cooldown_ms deve ser >= 0")
        self.max_per_window = max_per_window
        self.window_ms = window_ms
        self.cooldown_ms = cooldown_ms
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def check(self, principal_id: str, operation_name: str) -> RateLimitDecision:
        """Verifica e contabiliza uma execução de `operation_name`.

        Returns:
            RateLimitDecision. Negações não alteram o estado.
        """
        with self._lock:
            now = self._clock()
            entry = self._entries.get(principal_id)

            if entry is None or entry.is_expired(now):
                self._entries[principal_id] = RateLimitEntry(
                    principal_id=principal_id,
                    window_count=1,
                    window_reset_at=now + self.window_ms,
                    last_operation_name=operation_name,
                    last_operation_at=now,
                )
                return RateLimitDecision.allow()

            if entry.last_operation_name == operation_name:
                elapsed = now - entry.last_operation_at
                if elapsed < self.cooldown_ms:
                    return RateLimitDecision.deny(
                        _ceil_seconds(self.cooldown_ms - elapsed), "cooldown"
                    )

            if entry.window_count >= self.max_per_window:
                retry_after = _ceil_seconds(entry.window_reset_at - now)
                window_count = entry.window_count
            else:
                entry.window_count += 1
                entry.last_operation_name = operation_name
                entry.last_operation_at = now
                return RateLimitDecision.allow()

        logger.warning(
            "command_rate_limit_exceeded",
            extra={
                "principal_id": principal_id,
                "command_name": operation_name,
                "count": window_count,
                "limit": self.max_per_window,
                "retry_after_seconds": retry_after,
            },
        )
        return RateLimitDecision.deny(retry_after, "window_exhausted")

    def sweep(self) -> int:
        """Remove entradas cuja janela já expirou.

        Returns:
            Quantidade de entradas removidas.
        """
        with self._lock:
            now = self._clock()
            expired = [pid for pid, entry in self._entries.items() if entry.is_expired(now)]
            for pid in expired:
                del self._entries[pid]
            remaining = len(self._entries)

        if expired:
            logger.debug(
                "rate_limit_entries_swept",
                extra={"cleaned": len(expired), "remaining": remaining},
            )
        return len(expired)

    def get_entry(self, principal_id: str) -> RateLimitEntry | None:
        """Retorna cópia da entrada do principal (diagnóstico)."""
        with self._lock:
            entry = self._entries.get(principal_id)
            return replace(entry) if entry is not None else None

    def reset(self, principal_id: str | None = None) -> None:
        """Esquece um principal (ou todos, se None)."""
        with self._lock:
            if principal_id is None:
                self._entries.clear()
            else:
                self._entries.pop(principal_id, None)


def _ceil_seconds(milliseconds: float) -> int:
    return math.ceil(milliseconds / 1000)
