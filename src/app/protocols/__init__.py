"""Protocolos (contratos) consumidos pelo gateway.

Interfaces leves dependidas por app/coordinators; implementações concretas
vivem fora do gateway (bot, handlers de negócio).
"""

from app.protocols.interaction import CommandInteractionProtocol
from app.protocols.webhook_handler import WebhookHandlerProtocol

__all__ = [
    "CommandInteractionProtocol",
    "WebhookHandlerProtocol",
]
