"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="huckleberry-gateway")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("Operação OK", extra={"duration_ms": 42})

Campos obrigatórios em todo log:
- trace_id
- service
- level
- logger
- message
- timestamp
"""

from config.logging.config import configure_logging, get_logger, log_degraded, safe_extra
from config.logging.filters import TraceIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    ColorFormatter,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    # Formatters
    "ColorFormatter",
    # Filters
    "TraceIdFilter",
    # Configuração principal
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_degraded",
    "safe_extra",
]
