"""Settings do gateway de ingress.

Cada preocupação do gateway (webhook, rate limit, métricas) tem sua própria
dataclass para isolamento de mudanças.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações do endpoint de webhook.

    Attributes:
        secret: Secret compartilhado para validação HMAC dos payloads
        require_verification: Se True, webhook sem assinatura é rejeitado e
            ausência de secret é erro fatal
        port: Porta HTTP do webhook server
    """

    secret: str = ""
    require_verification: bool = False
    port: int = 3000

    @property
    def has_secret(self) -> bool:
        """Retorna True se há secret configurado."""
        return bool(self.secret)

    def validate(self) -> list[str]:
        """Valida configurações de webhook.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.require_verification and not self.secret:
            errors.append(
                "WEBHOOK_SECRET obrigatório quando REQUIRE_WEBHOOK_VERIFICATION=true"
            )

        if not 0 < self.port < 65536:
            errors.append("WEBHOOK_PORT deve estar entre 1 e 65535")

        return errors


@dataclass(frozen=True)
class RateLimitSettings:
    """Configurações de rate limit de comandos.

    Attributes:
        max_per_window: Comandos permitidos por principal na janela
        window_ms: Duração da janela de contagem (ms)
        cooldown_ms: Intervalo mínimo entre o mesmo comando (ms)
        sweep_interval_seconds: Intervalo da limpeza de entradas expiradas
    """

    max_per_window: int = 10
    window_ms: int = 60_000
    cooldown_ms: int = 2_000
    sweep_interval_seconds: float = 300.0

    def validate(self) -> list[str]:
        """Valida configurações de rate limit.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.max_per_window < 1:
            errors.append("COMMAND_RATE_LIMIT_MAX deve ser >= 1")

        if self.window_ms < 1:
            errors.append("COMMAND_RATE_LIMIT_WINDOW_MS deve ser >= 1")

        if self.cooldown_ms < 0:
            errors.append("COMMAND_COOLDOWN_MS deve ser >= 0")

        if self.sweep_interval_seconds <= 0:
            errors.append("RATE_LIMIT_SWEEP_INTERVAL_SECONDS deve ser > 0")

        return errors


@dataclass(frozen=True)
class MetricsSettings:
    """Configurações do buffer de métricas em memória.

    Attributes:
        capacity: Número máximo de amostras retidas
        slow_threshold_ms: Acima deste tempo a operação é logada como lenta
    """

    capacity: int = 1000
    slow_threshold_ms: float = 1000.0

    def validate(self) -> list[str]:
        """Valida configurações de métricas."""
        errors: list[str] = []

        if self.capacity < 1:
            errors.append("METRICS_CAPACITY deve ser >= 1")

        if self.slow_threshold_ms < 0:
            errors.append("METRICS_SLOW_THRESHOLD_MS deve ser >= 0")

        return errors


def _load_webhook_from_env() -> WebhookSettings:
    """Carrega WebhookSettings de variáveis de ambiente."""
    return WebhookSettings(
        secret=os.getenv("WEBHOOK_SECRET", ""),
        require_verification=_env_flag("REQUIRE_WEBHOOK_VERIFICATION"),
        port=int(os.getenv("WEBHOOK_PORT", "3000")),
    )


def _load_rate_limit_from_env() -> RateLimitSettings:
    """Carrega RateLimitSettings de variáveis de ambiente."""
    return RateLimitSettings(
        max_per_window=int(os.getenv("COMMAND_RATE_LIMIT_MAX", "10")),
        window_ms=int(os.getenv("COMMAND_RATE_LIMIT_WINDOW_MS", "60000")),
        cooldown_ms=int(os.getenv("COMMAND_COOLDOWN_MS", "2000")),
        sweep_interval_seconds=float(
            os.getenv("RATE_LIMIT_SWEEP_INTERVAL_SECONDS", "300")
        ),
    )


def _load_metrics_from_env() -> MetricsSettings:
    """Carrega MetricsSettings de variáveis de ambiente."""
    return MetricsSettings(
        capacity=int(os.getenv("METRICS_CAPACITY", "1000")),
        slow_threshold_ms=float(os.getenv("METRICS_SLOW_THRESHOLD_MS", "1000")),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhook_from_env()


@lru_cache(maxsize=1)
def get_rate_limit_settings() -> RateLimitSettings:
    """Retorna instância cacheada de RateLimitSettings."""
    return _load_rate_limit_from_env()


@lru_cache(maxsize=1)
def get_metrics_settings() -> MetricsSettings:
    """Retorna instância cacheada de MetricsSettings."""
    return _load_metrics_from_env()
