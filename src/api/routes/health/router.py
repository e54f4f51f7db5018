"""Endpoints de health check e diagnóstico de métricas."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


class OperationStatsResponse(BaseModel):
    """Snapshot das métricas em memória de uma operação."""

    operation: str
    count: int
    avg_duration_ms: float
    min_duration_ms: float
    max_duration_ms: float
    success_rate_percent: float


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: verifica se o serviço está rodando."""
    return HealthResponse(
        status="ok",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/metrics")
async def list_operations(request: Request) -> JSONResponse:
    """Lista as operações com amostras no buffer de métricas."""
    gateway = request.app.state.gateway
    return JSONResponse(content={"operations": gateway.metrics.operations()})


@router.get("/metrics/{operation}", response_model=OperationStatsResponse)
async def operation_stats(operation: str, request: Request) -> OperationStatsResponse:
    """Estatísticas agregadas de uma operação (zeros se não houver amostras)."""
    gateway = request.app.state.gateway
    stats = gateway.metrics.query(operation)
    return OperationStatsResponse(operation=operation, **stats.as_dict())
