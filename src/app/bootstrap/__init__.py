"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging e constrói o estado
compartilhado do gateway (rate limiter, métricas) a partir das settings.
O estado é sempre instanciado aqui e injetado; nada no núcleo é singleton
de módulo.

Uso:
    from app.bootstrap import initialize_app, create_gateway

    # Na inicialização do serviço
    initialize_app()
    gateway = create_gateway()
"""

from __future__ import annotations

import logging

from app.coordinators.gateway import GatewayDispatcher
from app.domain.errors import ConfigurationError
from app.observability import MetricsRecorder, get_trace_id
from app.services import RateLimiter, RateLimitSweeper
from config.logging import configure_logging
from config.settings import (
    MetricsSettings,
    RateLimitSettings,
    WebhookSettings,
    get_base_settings,
    get_metrics_settings,
    get_rate_limit_settings,
    get_webhook_settings,
)

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.

    Configura:
    - Logging estruturado (JSON em produção, colorido em dev) com trace_id
    """
    settings = get_base_settings()

    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        trace_id_getter=get_trace_id,
        json_output=settings.json_logs,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        ConfigurationError: Em ambiente estrito com configuração inválida.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"webhook: {error}" for error in get_webhook_settings().validate())
    errors.extend(f"rate_limit: {error}" for error in get_rate_limit_settings().validate())
    errors.extend(f"metrics: {error}" for error in get_metrics_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise ConfigurationError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Factories (estado do gateway)
# ──────────────────────────────────────────────────────────────────────────────


def create_rate_limiter(settings: RateLimitSettings | None = None) -> RateLimiter:
    """Cria RateLimiter a partir das settings."""
    settings = settings or get_rate_limit_settings()
    return RateLimiter(
        max_per_window=settings.max_per_window,
        window_ms=settings.window_ms,
        cooldown_ms=settings.cooldown_ms,
    )


def create_metrics_recorder(settings: MetricsSettings | None = None) -> MetricsRecorder:
    """Cria MetricsRecorder a partir das settings."""
    settings = settings or get_metrics_settings()
    return MetricsRecorder(
        capacity=settings.capacity,
        slow_threshold_ms=settings.slow_threshold_ms,
    )


def create_gateway(
    *,
    rate_limiter: RateLimiter | None = None,
    metrics: MetricsRecorder | None = None,
    webhook_settings: WebhookSettings | None = None,
) -> GatewayDispatcher:
    """Cria o GatewayDispatcher com estado próprio (uma instância por app)."""
    return GatewayDispatcher(
        rate_limiter=rate_limiter or create_rate_limiter(),
        metrics=metrics or create_metrics_recorder(),
        webhook_settings=webhook_settings or get_webhook_settings(),
    )


def create_rate_limit_sweeper(
    gateway: GatewayDispatcher,
    settings: RateLimitSettings | None = None,
) -> RateLimitSweeper:
    """Cria o sweeper periódico do rate limiter do gateway."""
    settings = settings or get_rate_limit_settings()
    return RateLimitSweeper(
        gateway.rate_limiter,
        interval_seconds=settings.sweep_interval_seconds,
    )
