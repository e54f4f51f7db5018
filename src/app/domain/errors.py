"""Taxonomia de erros do gateway.

Todo erro levantado pelo próprio gateway carrega um `ErrorKind` explícito.
Falhas vindas de colaboradores externos sem tag são classificadas
heuristicamente em `app.services.error_classifier`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class ErrorKind(StrEnum):
    """Categorias fechadas de falha."""

    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ErrorKindPolicy:
    """Severidade, status HTTP e mensagem genérica de uma categoria."""

    severity: int
    status_code: int
    user_message: str


ERROR_KIND_POLICIES: Mapping[ErrorKind, ErrorKindPolicy] = MappingProxyType(
    {
        ErrorKind.VALIDATION: ErrorKindPolicy(
            logging.WARNING, 400, "❌ The request is invalid. Please check your input."
        ),
        ErrorKind.AUTH: ErrorKindPolicy(
            logging.WARNING, 401, "❌ You do not have permission to perform this action."
        ),
        ErrorKind.NOT_FOUND: ErrorKindPolicy(
            logging.INFO, 404, "❌ The requested resource was not found."
        ),
        ErrorKind.RATE_LIMITED: ErrorKindPolicy(
            logging.WARNING, 429, "❌ Rate limit exceeded. Please wait a moment and try again."
        ),
        ErrorKind.DATABASE: ErrorKindPolicy(
            logging.ERROR, 500, "❌ Database error occurred. Please try again later."
        ),
        ErrorKind.EXTERNAL_API: ErrorKindPolicy(
            logging.ERROR, 502, "❌ An external service is unavailable. Please try again later."
        ),
        ErrorKind.UNKNOWN: ErrorKindPolicy(
            logging.ERROR, 500, "❌ An unexpected error occurred. Please try again later."
        ),
    }
)


class GatewayError(Exception):
    """Base para erros com categoria explícita.

    Args:
        message: Mensagem interna (vai para logs, nunca para o usuário).
        kind: Categoria do erro.
        details: Contexto adicional para logs.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.details: dict[str, Any] = dict(details or {})

    @property
    def status_code(self) -> int:
        return ERROR_KIND_POLICIES[self.kind].status_code


class ValidationError(GatewayError):
    """Entrada inválida. A mensagem é escrita para o usuário."""

    kind = ErrorKind.VALIDATION


class AuthError(GatewayError):
    """Falha de autenticação/autorização."""

    kind = ErrorKind.AUTH


class NotFoundError(GatewayError):
    """Recurso inexistente."""

    kind = ErrorKind.NOT_FOUND


class RateLimitedError(GatewayError):
    """Limite de requisições excedido."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str,
        *,
        retry_after_seconds: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.retry_after_seconds = retry_after_seconds


class DatabaseError(GatewayError):
    """Falha de acesso ao banco de dados."""

    kind = ErrorKind.DATABASE


class ExternalApiError(GatewayError):
    """Falha em API externa (Discord, e-mail, etc.)."""

    kind = ErrorKind.EXTERNAL_API


class WebhookError(ValidationError):
    """Payload de webhook inválido."""


class ConfigurationError(RuntimeError):
    """Configuração inválida detectada no startup."""


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """Falha já classificada, pronta para log e para o usuário.

    Imutável após criada. `user_message` nunca contém detalhes da causa.
    """

    kind: ErrorKind
    user_message: str
    cause: BaseException
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def severity(self) -> int:
        return ERROR_KIND_POLICIES[self.kind].severity

    @property
    def status_code(self) -> int:
        return ERROR_KIND_POLICIES[self.kind].status_code

    @property
    def trace_id(self) -> str | None:
        return self.context.get("trace_id")
