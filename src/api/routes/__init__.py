"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhook, health, métricas)
- Ler o request bruto (headers, corpo) e delegar ao gateway
- Respostas HTTP apropriadas

Estrutura:
- routes/webhook/: webhook de compras (assinatura HMAC)
- routes/health/: health check e snapshot de métricas

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
