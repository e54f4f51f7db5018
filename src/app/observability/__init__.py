"""Observabilidade: trace_id ambiente e métricas de performance.

Re-exporta funções de trace_id e o recorder de métricas para uso em toda a
aplicação.

Uso:
    from app.observability import get_trace_id, trace_context
    from app.observability import MetricsRecorder
"""

from app.observability.correlation import (
    MAX_INBOUND_TRACE_ID_LENGTH,
    REQUEST_ID_HEADER,
    generate_trace_id,
    get_trace_id,
    normalize_inbound_trace_id,
    reset_trace_id,
    resolve_trace_id,
    run_with_trace_id,
    run_with_trace_id_sync,
    set_trace_id,
    trace_context,
)
from app.observability.metrics import MetricSample, MetricsRecorder, OperationStats

__all__ = [
    "MAX_INBOUND_TRACE_ID_LENGTH",
    "REQUEST_ID_HEADER",
    "MetricSample",
    "MetricsRecorder",
    "OperationStats",
    "generate_trace_id",
    "get_trace_id",
    "normalize_inbound_trace_id",
    "reset_trace_id",
    "resolve_trace_id",
    "run_with_trace_id",
    "run_with_trace_id_sync",
    "set_trace_id",
    "trace_context",
]
