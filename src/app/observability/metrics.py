"""Métricas de performance em memória.

Amostras de duração/resultado por operação ficam num buffer circular de
capacidade fixa (a mais antiga é descartada quando cheio). Operações acima
do limiar de lentidão são logadas no momento da inserção.

As amostras não sobrevivem a reinícios; para agregação externa use os logs
estruturados (`slow_operation_detected`).

Uso:
    metrics = MetricsRecorder(capacity=1000, slow_threshold_ms=1000)

    result = await metrics.measure("db.fetch_sessions", fetch, {"user_id": uid})
    stats = metrics.query("db.fetch_sessions")
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar

from config.logging import safe_extra

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000
DEFAULT_SLOW_THRESHOLD_MS = 1000.0


@dataclass(frozen=True, slots=True)
class MetricSample:
    """Amostra imutável de uma execução de operação."""

    operation: str
    duration_ms: float
    success: bool
    timestamp: datetime
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class OperationStats:
    """Estatísticas agregadas de uma operação."""

    count: int = 0
    avg_duration_ms: float = 0.0
    min_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    success_rate_percent: float = 0.0

    def as_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "avg_duration_ms": round(self.avg_duration_ms, 2),
            "min_duration_ms": round(self.min_duration_ms, 2),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "success_rate_percent": round(self.success_rate_percent, 2),
        }


class MetricsRecorder:
    """Buffer circular de amostras com consulta agregada.

    Thread-safe: inserções e leituras passam pelo mesmo lock, sem
    pontos de suspensão entre leitura e escrita.

    Args:
        capacity: Número máximo de amostras retidas.
        slow_threshold_ms: Duração acima da qual um warning é logado.
        clock: Relógio monotônico em segundos (injetável em testes).
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity deve ser >= 1")
        self._samples: deque[MetricSample] = deque(maxlen=capacity)
        self._slow_threshold_ms = slow_threshold_ms
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    @property
    def slow_threshold_ms(self) -> float:
        return self._slow_threshold_ms

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def record(
        self,
        operation: str,
        duration_ms: float,
        success: bool,
        metadata: Mapping[str, Any] | None = None,
    ) -> MetricSample:
        """Registra uma amostra; loga warning se a operação foi lenta."""
        sample = MetricSample(
            operation=operation,
            duration_ms=duration_ms,
            success=success,
            timestamp=datetime.now(UTC),
            metadata=MappingProxyType(dict(metadata or {})),
        )
        with self._lock:
            self._samples.append(sample)

        if duration_ms > self._slow_threshold_ms:
            logger.warning(
                "slow_operation_detected",
                extra={
                    **safe_extra(sample.metadata),
                    "operation": operation,
                    "duration_ms": round(duration_ms, 2),
                    "threshold_ms": self._slow_threshold_ms,
                    "success": success,
                },
            )
        return sample

    async def measure(
        self,
        operation: str,
        fn: Callable[[], Awaitable[T]],
        metadata: Mapping[str, Any] | None = None,
    ) -> T:
        """Executa `fn` medindo a duração.

        A amostra é registrada em sucesso e em falha; em falha a exceção
        original é relançada sem alteração.
        """
        started_at = self._clock()
        try:
            result = await fn()
        except BaseException:
            self.record(operation, self._elapsed_ms(started_at), False, metadata)
            raise
        self.record(operation, self._elapsed_ms(started_at), True, metadata)
        return result

    def measure_sync(
        self,
        operation: str,
        fn: Callable[[], T],
        metadata: Mapping[str, Any] | None = None,
    ) -> T:
        """Versão síncrona de `measure`."""
        started_at = self._clock()
        try:
            result = fn()
        except BaseException:
            self.record(operation, self._elapsed_ms(started_at), False, metadata)
            raise
        self.record(operation, self._elapsed_ms(started_at), True, metadata)
        return result

    def query(self, operation: str) -> OperationStats:
        """Agrega as amostras atuais de `operation` (zeros se não houver)."""
        with self._lock:
            durations = [s.duration_ms for s in self._samples if s.operation == operation]
            successes = sum(
                1 for s in self._samples if s.operation == operation and s.success
            )

        if not durations:
            return OperationStats()

        count = len(durations)
        return OperationStats(
            count=count,
            avg_duration_ms=sum(durations) / count,
            min_duration_ms=min(durations),
            max_duration_ms=max(durations),
            success_rate_percent=successes / count * 100,
        )

    def samples(self, operation: str | None = None) -> list[MetricSample]:
        """Retorna cópia das amostras (filtradas por operação, se informada)."""
        with self._lock:
            if operation is None:
                return list(self._samples)
            return [s for s in self._samples if s.operation == operation]

    def operations(self) -> list[str]:
        """Nomes distintos de operação presentes no buffer, ordenados."""
        with self._lock:
            return sorted({s.operation for s in self._samples})

    def clear(self) -> None:
        """Descarta todas as amostras."""
        with self._lock:
            self._samples.clear()

    def _elapsed_ms(self, started_at: float) -> float:
        return (self._clock() - started_at) * 1000
