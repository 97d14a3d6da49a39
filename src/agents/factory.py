"""Adapter registry: one entry per provider, dispatched by ProviderName."""
import logging

from config import AppConfig, config as default_config
from src.agents.anthropic_adapter import AnthropicAdapter
from src.agents.base import ProviderAdapter, ProviderName
from src.agents.google_adapter import GoogleAdapter
from src.agents.openai_adapter import OpenAIAdapter

logger = logging.getLogger(__name__)

ADAPTERS: dict[ProviderName, type[ProviderAdapter]] = {
    ProviderName.OPENAI: OpenAIAdapter,
    ProviderName.GOOGLE: GoogleAdapter,
    ProviderName.ANTHROPIC: AnthropicAdapter,
}


def create_adapter(provider: ProviderName | str, cfg: AppConfig = default_config) -> ProviderAdapter:
    """Instantiate the adapter registered for ``provider``.

    Raises:
        ValueError: If the provider name is unrecognised.
    """
    try:
        adapter_cls = ADAPTERS[ProviderName(provider)]
    except (KeyError, ValueError):
        raise ValueError(
            f"Unknown provider {provider!r}. "
            f"Choose one of: {', '.join(p.value for p in ADAPTERS)}."
        ) from None
    return adapter_cls(cfg)


def create_adapters(cfg: AppConfig = default_config) -> dict[ProviderName, ProviderAdapter]:
    """Build one adapter per registered provider."""
    adapters = {provider: create_adapter(provider, cfg) for provider in ADAPTERS}
    logger.info("Adapters ready: %s", [a.name for a in adapters.values()])
    return adapters
