"""Dispatcher do gateway: ponto único de entrada de webhooks e comandos.

Fluxos:
- Webhook: trace_id → política de assinatura → parse → handler
- Comando: trace_id → rate limit → handler

Nos dois fluxos o handler roda dentro do envelope measure+classify:
a duração vai para o MetricsRecorder e qualquer falha é classificada,
logada com o trace_id e devolvida ao chamador como mensagem genérica.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import partial
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from app.coordinators.gateway.replies import (
    deliver_reply,
    format_rate_limit_message,
    send_interaction_reply,
)
from app.coordinators.gateway.webhook_payload import InvalidJsonError, parse_webhook_body
from app.coordinators.gateway.webhook_policy import WebhookVerdict, evaluate_webhook_signature
from app.observability import get_trace_id, resolve_trace_id, trace_context
from app.services.error_classifier import classify
from config.logging import safe_extra

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from app.domain.errors import ClassifiedError
    from app.observability import MetricsRecorder
    from app.protocols import CommandInteractionProtocol, WebhookHandlerProtocol
    from app.services.rate_limiter import RateLimitDecision, RateLimiter
    from config.settings import WebhookSettings

T = TypeVar("T")

logger = logging.getLogger(__name__)

@dataclass(frozen=True, slots=True)
class DispatchOutcome(Generic[T]):
    """Resultado de um despacho.

    Exatamente um entre `value` (sucesso) e `error` (falha classificada)
    é relevante; `decision` só existe no fluxo de comandos.
    """

    trace_id: str
    value: T | None = None
    error: ClassifiedError | None = None
    decision: RateLimitDecision | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and (self.decision is None or self.decision.allowed)


@dataclass(frozen=True, slots=True)
class WebhookResult:
    """Resposta HTTP do fluxo de webhook."""

    status_code: int
    body: dict[str, Any]
    trace_id: str
    verdict: WebhookVerdict | None = None
    headers: dict[str, str] = field(default_factory=dict)


class GatewayDispatcher:
    """Orquestra contexto, verificação, rate limit, métricas e erros.

    Args:
        rate_limiter: Estado de rate limit (injetado, nunca global).
        metrics: Recorder de métricas (injetado, nunca global).
        webhook_settings: Secret e modo estrito do webhook.
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        metrics: MetricsRecorder,
        webhook_settings: WebhookSettings,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._metrics = metrics
        self._webhook_settings = webhook_settings

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    @property
    def metrics(self) -> MetricsRecorder:
        return self._metrics

    async def dispatch(
        self,
        handler: Callable[[], Awaitable[T]],
        *,
        operation: str,
        trace_id: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        reply: Callable[[str], Awaitable[Any]] | None = None,
    ) -> DispatchOutcome[T]:
        """Executa `handler` no envelope measure+classify.

        Args:
            handler: Callable sem argumentos que retorna awaitable.
            operation: Nome da operação (métricas e logs).
            trace_id: ID a vincular; se None, herda o do escopo atual ou gera.
            metadata: Contexto adicional para métricas e logs.
            reply: Canal de resposta ao usuário; recebe a mensagem genérica
                em caso de falha (best-effort).

        Returns:
            DispatchOutcome com o valor ou o erro classificado. Falhas do
            handler nunca são relançadas (exceto cancelamento).
        """
        meta = dict(metadata or {})
        with trace_context(trace_id or get_trace_id()) as bound:
            try:
                value = await self._metrics.measure(operation, handler, meta)
            except Exception as exc:
                classified = classify(exc, {"operation": operation, **meta})
                self._log_failure(classified)
                if reply is not None:
                    await deliver_reply(
                        reply,
                        classified.user_message,
                        {"operation": operation, **meta},
                    )
                return DispatchOutcome(trace_id=bound, error=classified)
            return DispatchOutcome(trace_id=bound, value=value)

    async def dispatch_command(
        self,
        interaction: CommandInteractionProtocol,
        handler: Callable[[CommandInteractionProtocol], Awaitable[T]],
        *,
        trace_id: str | None = None,
    ) -> DispatchOutcome[T]:
        """Entrada de comandos: rate limit antes de qualquer handler.

        Negações são terminais: a mensagem transitória (com o tempo de espera)
        é enviada pelo canal de confirmação e o handler não roda.
        """
        metadata = {
            "command_name": interaction.command_name,
            "user_id": interaction.user_id,
            "guild_id": interaction.guild_id,
        }
        send = partial(send_interaction_reply, interaction)

        with trace_context(trace_id or get_trace_id()) as bound:
            decision = self._rate_limiter.check(
                interaction.user_id, interaction.command_name
            )
            if not decision.allowed:
                logger.info(
                    "command_rate_limited",
                    extra={
                        **metadata,
                        "reason": decision.reason,
                        "retry_after_seconds": decision.retry_after_seconds,
                    },
                )
                await deliver_reply(
                    send,
                    format_rate_limit_message(decision.retry_after_seconds),
                    metadata,
                )
                return DispatchOutcome(trace_id=bound, decision=decision)

            outcome = await self.dispatch(
                partial(handler, interaction),
                operation=f"command.{interaction.command_name}",
                metadata=metadata,
                reply=send,
            )
            return replace(outcome, decision=decision)

    async def dispatch_webhook(
        self,
        raw_body: bytes,
        headers: Mapping[str, str],
        handler: WebhookHandlerProtocol,
        *,
        operation: str = "webhook",
    ) -> WebhookResult:
        """Entrada de webhooks: assinatura antes de qualquer handler.

        Returns:
            WebhookResult com status/corpo prontos para a resposta HTTP.
            401 assinatura ausente/inválida, 500 secret ausente em modo
            estrito, 400 JSON inválido; falhas do handler usam o status da
            categoria classificada.
        """
        with trace_context(get_trace_id() or resolve_trace_id(headers)) as bound:
            verdict = evaluate_webhook_signature(raw_body, headers, self._webhook_settings)
            if not verdict.proceed:
                return WebhookResult(
                    status_code=verdict.status_code,
                    body={"error": verdict.message},
                    trace_id=bound,
                    verdict=verdict,
                )

            try:
                payload = parse_webhook_body(raw_body)
            except InvalidJsonError as exc:
                logger.warning(
                    "webhook_json_invalid",
                    extra={"operation": operation, "error": str(exc)},
                )
                return WebhookResult(
                    status_code=400,
                    body={"error": "Invalid JSON payload"},
                    trace_id=bound,
                    verdict=verdict,
                )

            outcome = await self.dispatch(
                partial(handler, payload),
                operation=operation,
                metadata={
                    "payload_size": len(raw_body),
                    "signature_outcome": verdict.outcome,
                },
            )
            if outcome.error is not None:
                return WebhookResult(
                    status_code=outcome.error.status_code,
                    body={"error": outcome.error.user_message},
                    trace_id=bound,
                    verdict=verdict,
                )

            return WebhookResult(
                status_code=200,
                body=outcome.value if outcome.value is not None else {"status": "received"},
                trace_id=bound,
                verdict=verdict,
            )

    async def run_safely(
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        operation: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> T | None:
        """Executa operação acessória (fire-and-forget) sem propagar falhas.

        Útil para efeitos colaterais que não devem derrubar o comando
        (ex: notificação de admin). Falhas são logadas com o trace_id.
        """
        outcome = await self.dispatch(fn, operation=operation, metadata=metadata)
        return outcome.value

    def _log_failure(self, classified: ClassifiedError) -> None:
        logger.error(
            "gateway_handler_failed",
            extra={
                **safe_extra(classified.context),
                "severity": logging.getLevelName(classified.severity),
            },
            exc_info=classified.cause,
        )

