"""Configuração do pytest para o gateway Huckleberry."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import (  # noqa: E402
    get_base_settings,
    get_metrics_settings,
    get_rate_limit_settings,
    get_webhook_settings,
)


class FakeClock:
    """Relógio manual (milissegundos ou segundos, conforme o consumidor)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, delta: float) -> None:
        self.now += delta


class FakeInteraction:
    """Interação de comando em memória (CommandInteractionProtocol)."""

    def __init__(
        self,
        *,
        user_id: str = "user-1",
        command_name: str = "session",
        guild_id: str | None = "guild-1",
        deferred: bool = False,
        replied: bool = False,
        fail_replies: bool = False,
    ) -> None:
        self.user_id = user_id
        self.command_name = command_name
        self.guild_id = guild_id
        self.deferred = deferred
        self.replied = replied
        self.fail_replies = fail_replies
        self.replies: list[tuple[str, bool]] = []
        self.edits: list[str] = []

    async def reply(self, content: str, *, ephemeral: bool = False) -> None:
        if self.fail_replies:
            raise RuntimeError("Unknown interaction")
        self.replies.append((content, ephemeral))
        self.replied = True

    async def edit_reply(self, content: str) -> None:
        if self.fail_replies:
            raise RuntimeError("Unknown interaction")
        self.edits.append(content)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings são cacheadas com lru_cache; cada teste lê o env limpo."""
    caches = (
        get_base_settings,
        get_metrics_settings,
        get_rate_limit_settings,
        get_webhook_settings,
    )
    for getter in caches:
        getter.cache_clear()
    yield
    for getter in caches:
        getter.cache_clear()
