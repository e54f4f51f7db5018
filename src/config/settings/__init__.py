"""Agregador de settings do gateway Huckleberry.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    LogFormat,
    get_base_settings,
)

# Gateway settings
from config.settings.gateway import (
    MetricsSettings,
    RateLimitSettings,
    WebhookSettings,
    get_metrics_settings,
    get_rate_limit_settings,
    get_webhook_settings,
)

__all__ = [
    # Base
    "BaseSettings",
    "Environment",
    "LogFormat",
    # Gateway
    "MetricsSettings",
    "RateLimitSettings",
    "WebhookSettings",
    "get_base_settings",
    "get_metrics_settings",
    "get_rate_limit_settings",
    "get_webhook_settings",
]
