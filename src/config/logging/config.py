"""Configuração centralizada de logging.

Funções para configurar logging estruturado com:
- Campos obrigatórios (trace_id, service, level, logger, message)
- JSON em produção, linha colorida em desenvolvimento
- Níveis configuráveis por ambiente

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="huckleberry-gateway")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("command_dispatched", extra={"command_name": "session"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import TraceIdFilter
from config.logging.formatters import (
    RESERVED_RECORD_ATTRS,
    ColorFormatter,
    create_json_formatter,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Nome padrão do serviço
DEFAULT_SERVICE_NAME = "huckleberry-gateway"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    trace_id_getter: Callable[[], str | None] | None = None,
    *,
    json_output: bool = True,
) -> None:
    """Configura logging estruturado para o serviço.

    Deve ser chamada uma vez na inicialização do serviço (app/bootstrap/).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        trace_id_getter: Função opcional que retorna o trace_id
            do contexto atual (ex: de ContextVar).
        json_output: True para JSON (produção), False para saída colorida.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    formatter = create_json_formatter() if json_output else ColorFormatter()

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(formatter)
    handler.addFilter(TraceIdFilter(service_name, trace_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado.

    O filter injeta automaticamente service e trace_id.
    """
    return logging.getLogger(name)


def log_degraded(
    logger: logging.Logger,
    component: str,
    reason: str,
    **context: object,
) -> None:
    """Log observável de operação degradada (sem PII).

    Útil quando uma garantia de segurança foi relaxada por configuração
    (ex: webhook aceito sem verificação de assinatura).

    Args:
        logger: Logger instance.
        component: Nome do componente (ex: "webhook_verification").
        reason: Razão da degradação (ex: "secret_not_configured").
        **context: Campos adicionais para o log.
    """
    extra: dict[str, object] = {
        "degraded": True,
        "component": component,
        "reason": reason,
    }
    extra.update(safe_extra(context))

    logger.warning(
        "Degraded operation in %s",
        component,
        extra=extra,
    )


def safe_extra(context: Mapping[str, object]) -> dict[str, object]:
    """Prepara contexto arbitrário para uso como `extra`.

    Chaves que colidem com atributos de LogRecord (`name`, `module`,
    `message`...) fariam o logging levantar KeyError; recebem o prefixo
    `ctx_`.
    """
    return {
        (f"ctx_{key}" if key in RESERVED_RECORD_ATTRS else key): value
        for key, value in context.items()
    }
