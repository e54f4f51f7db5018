"""Entrypoint do gateway Huckleberry.

Este módulo é o ponto de entrada do webhook server.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import RequestIdMiddleware
from api.routes import create_api_router
from app.bootstrap import (
    create_gateway,
    create_rate_limit_sweeper,
    initialize_app,
    validate_runtime_settings,
)
from config.logging import get_logger
from config.settings import get_base_settings, get_webhook_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.coordinators.gateway import GatewayDispatcher
    from app.protocols import WebhookHandlerProtocol

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicia limpeza periódica do rate limiter

    Shutdown:
    - Encerra a limpeza periódica
    """
    logger.info("app_starting", extra={"component": "lifespan"})
    validate_runtime_settings()

    sweeper = create_rate_limit_sweeper(app.state.gateway)
    sweeper.start()
    app.state.rate_limit_sweeper = sweeper

    yield

    logger.info("app_shutting_down", extra={"component": "lifespan"})
    await sweeper.stop()


def create_app(
    gateway: GatewayDispatcher | None = None,
    webhook_handler: WebhookHandlerProtocol | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        gateway: Dispatcher com estado próprio. Se None, criado a partir
            das settings.
        webhook_handler: Handler de negócio do webhook. Se None, o
            endpoint apenas confirma o recebimento.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Huckleberry Gateway",
        description="Gateway de ingress do bot: webhooks assinados e comandos",
        version="1.0.0",
        debug=get_base_settings().debug,
        lifespan=lifespan,
    )

    fastapi_app.state.gateway = gateway or create_gateway()
    fastapi_app.state.webhook_handler = webhook_handler

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    fastapi_app.add_middleware(RequestIdMiddleware)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info(
        "app_configured",
        extra={
            "component": "app",
            "environment": get_base_settings().environment,
            "webhook_secret_configured": get_webhook_settings().has_secret,
        },
    )

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    settings = get_base_settings()
    logger.info("Starting Huckleberry gateway", extra={"environment": settings.environment})
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=get_webhook_settings().port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
