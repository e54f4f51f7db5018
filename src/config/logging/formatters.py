"""Formatters de logging estruturado.

Define dois formatters:
- JSON (produção): campos obrigatórios + contexto passado via `extra`
- Colorido (desenvolvimento): linha legível com contexto ao final

Campos obrigatórios:
- trace_id
- service
- timestamp (asctime)
- level
- logger (name)
- message
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado
REQUIRED_LOG_FIELDS = frozenset(
    {
        "asctime",
        "levelname",
        "name",
        "message",
        "trace_id",
        "service",
    }
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}

# Cores ANSI por nível (apenas formato de desenvolvimento)
LEVEL_COLORS = {
    "DEBUG": "\x1b[36m",  # ciano
    "INFO": "\x1b[32m",  # verde
    "WARNING": "\x1b[33m",  # amarelo
    "ERROR": "\x1b[31m",  # vermelho
    "CRITICAL": "\x1b[31m",
}
RESET_COLOR = "\x1b[0m"

# Atributos nativos de LogRecord (não fazem parte do contexto)
RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "service", "taskName"}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Returns:
        JsonFormatter configurado para logs estruturados.

    Exemplo de output:
        {
            "timestamp": "2026-02-02T10:30:00+0000",
            "level": "INFO",
            "logger": "app.coordinators.gateway.dispatcher",
            "message": "webhook_received",
            "trace_id": "9f1c...",
            "service": "huckleberry-gateway",
            "payload_size": 42
        }
    """
    format_string = " ".join(f"%({field})s" for field in sorted(REQUIRED_LOG_FIELDS))

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def extract_context(record: logging.LogRecord) -> dict[str, Any]:
    """Retorna os campos passados via `extra` (mais trace_id, se houver)."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in RESERVED_RECORD_ATTRS and value not in (None, "")
    }


class ColorFormatter(logging.Formatter):
    """Formatter legível para desenvolvimento.

    Formato: ``[timestamp] LEVEL logger message {contexto}``, com o nível
    colorido e o traceback (se houver) em linhas seguintes.
    """

    def __init__(self, *, use_colors: bool = True) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")
        self._use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.datefmt)
        level = record.levelname
        if self._use_colors:
            color = LEVEL_COLORS.get(level, "")
            level = f"{color}{level}{RESET_COLOR}"

        output = f"[{timestamp}] {level} {record.name} {record.getMessage()}"

        context = extract_context(record)
        if context:
            output += " " + json.dumps(context, default=str, sort_keys=True)

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)
        elif record.exc_text:
            output += "\n" + record.exc_text

        return output
