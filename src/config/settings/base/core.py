"""Settings base do gateway Huckleberry.

Configurações comuns ao webhook server e ao pipeline de comandos do bot.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]
LogFormat = Literal["json", "pretty"]

VALID_LOG_FORMATS = frozenset({"json", "pretty"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs e tracing
        debug: Ativa o modo debug do FastAPI (traceback nas respostas 500)
        log_level: Nível de log (DEBUG, INFO, ...)
        log_format: Formato dos logs (json em produção, pretty em dev)
    """

    # Ambiente
    environment: Environment = "development"
    service_name: str = "huckleberry-gateway"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = "pretty"

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment == "staging"

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment == "development"

    @property
    def json_logs(self) -> bool:
        """Retorna True se os logs devem sair em JSON."""
        return self.log_format == "json"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        valid_envs = {"development", "staging", "production"}
        if self.environment not in valid_envs:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_format not in VALID_LOG_FORMATS:
            errors.append(f"LOG_FORMAT inválido: {self.log_format}")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _default_log_format(environment: Environment) -> LogFormat:
    return "pretty" if environment == "development" else "json"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    environment = _parse_environment(os.getenv("ENVIRONMENT", "development"))
    return BaseSettings(
        environment=environment,
        service_name=os.getenv("SERVICE_NAME", "huckleberry-gateway"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format=os.getenv(  # type: ignore[arg-type]
            "LOG_FORMAT", _default_log_format(environment)
        ).lower(),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
