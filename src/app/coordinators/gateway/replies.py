"""Entrega de mensagens ao usuário pelo canal de confirmação do comando."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from config.logging import safe_extra

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from app.protocols import CommandInteractionProtocol

logger = logging.getLogger(__name__)


def format_rate_limit_message(retry_after_seconds: int | None) -> str:
    """Mensagem transitória de rate limit para o usuário."""
    if retry_after_seconds:
        plural = "" if retry_after_seconds == 1 else "s"
        return (
            "⏱️ **Rate Limited**\n\nYou're using commands too quickly. "
            f"Please wait {retry_after_seconds} second{plural} before trying again."
        )
    return "⏱️ **Rate Limited**\n\nYou're using commands too quickly. Please slow down."


async def send_interaction_reply(
    interaction: CommandInteractionProtocol,
    content: str,
) -> None:
    """Edita a confirmação existente ou envia uma resposta efêmera nova."""
    if interaction.deferred or interaction.replied:
        await interaction.edit_reply(content)
    else:
        await interaction.reply(content, ephemeral=True)


async def deliver_reply(
    send: Callable[[str], Awaitable[Any]],
    content: str,
    log_context: Mapping[str, Any] | None = None,
) -> bool:
    """Entrega best-effort: falhas são logadas e descartadas.

    Args:
        send: Canal de resposta.
        content: Mensagem ao usuário.
        log_context: Contexto (operação, usuário) anexado ao log de falha.

    Returns:
        True se a mensagem foi entregue.
    """
    try:
        await send(content)
    except Exception as exc:
        logger.error(
            "reply_delivery_failed",
            extra={**safe_extra(log_context or {}), "error_type": type(exc).__name__},
            exc_info=exc,
        )
        return False
    return True
