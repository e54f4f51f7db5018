"""Serviços de aplicação.

Unidades reutilizáveis sem IO direto: rate limit e classificação de erros.
"""

from app.services.error_classifier import classify, infer_kind, user_message_for
from app.services.rate_limit_sweeper import RateLimitSweeper
from app.services.rate_limiter import RateLimitDecision, RateLimitEntry, RateLimiter

__all__ = [
    "RateLimitDecision",
    "RateLimitEntry",
    "RateLimitSweeper",
    "RateLimiter",
    "classify",
    "infer_kind",
    "user_message_for",
]
