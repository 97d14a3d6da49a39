"""Shared fixtures for all tests."""
import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.agents.base import ProviderAdapter, ProviderName


class StubAdapter(ProviderAdapter):
    """Deterministic adapter for orchestrator tests.

    Returns ``text`` after ``delay`` seconds, or raises ``side_effect``.
    Every call is recorded in ``calls`` as ``(prompt, credential)``.
    """

    def __init__(self, provider: ProviderName, text: str = "", delay: float = 0.0,
                 side_effect: Exception | None = None) -> None:
        super().__init__()
        self.provider = provider
        self._text = text or f"reply from {provider.value}"
        self._delay = delay
        self._side_effect = side_effect
        self.calls: list[tuple[str, str]] = []

    @property
    def model(self) -> str:
        return "stub"

    async def _call(self, prompt: str, credential: str):
        self.calls.append((prompt, credential))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._side_effect is not None:
            raise self._side_effect
        return self._text

    def _extract_text(self, response) -> str | None:
        return response


@pytest.fixture
def make_stub():
    """Factory fixture: ``make_stub(ProviderName.OPENAI, text="hi")``."""
    return StubAdapter


@pytest.fixture
def stubs():
    """One well-behaved stub per provider."""
    return {
        ProviderName.OPENAI: StubAdapter(ProviderName.OPENAI, text="a"),
        ProviderName.GOOGLE: StubAdapter(ProviderName.GOOGLE, text="g"),
        ProviderName.ANTHROPIC: StubAdapter(ProviderName.ANTHROPIC, text="b"),
    }


@pytest.fixture
def all_keys():
    return {"openai": "sk-openai", "google": "g-key", "anthropic": "sk-ant"}


@pytest.fixture
def mock_config(tmp_path, monkeypatch):
    """AppConfig whose key files live in a temp dir and env keys are cleared."""
    import config as config_module
    from config import AppConfig

    monkeypatch.setattr(config_module, "ROOT", tmp_path)
    for var in ("OPENAI_API_KEY", "GOOGLE_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return AppConfig()
