"""Protocolo do canal de resposta de um comando do bot.

O gateway não depende da biblioteca do Discord: qualquer objeto que
exponha estes atributos e métodos pode ser despachado.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CommandInteractionProtocol(Protocol):
    """Contrato mínimo de uma interação de comando.

    Attributes:
        user_id: Identidade do principal que executou o comando.
        command_name: Nome lógico do comando.
        guild_id: Servidor de origem (None em DM).
        deferred: True se uma confirmação diferida já foi enviada.
        replied: True se uma resposta já foi enviada.
    """

    user_id: str
    command_name: str
    guild_id: str | None
    deferred: bool
    replied: bool

    async def reply(self, content: str, *, ephemeral: bool = False) -> None: ...

    async def edit_reply(self, content: str) -> None: ...
