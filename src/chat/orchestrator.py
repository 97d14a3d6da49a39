"""Fan a prompt out to the selected providers and compose one reply.

Single-provider modes are strict: a missing key or a provider failure is the
caller's error.  Combined mode is best-effort: every provider with a key is
called concurrently, failures are logged and left out, and the surviving
replies are joined in a fixed provider order.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from config import AppConfig, config as default_config
from src.agents.base import ProviderAdapter, ProviderError, ProviderName
from src.agents.factory import create_adapters
from src.chat.credentials import CredentialSet, credential_set

logger = logging.getLogger(__name__)

# Order in which combined replies are laid out, independent of completion order
COMBINED_ORDER: tuple[ProviderName, ...] = (
    ProviderName.OPENAI,
    ProviderName.GOOGLE,
    ProviderName.ANTHROPIC,
)

NO_KEYS_MESSAGE = "No API keys configured. Please add at least one API key in settings."
EMPTY_COMBINED_TEXT = "No response was generated."
EMPTY_PROMPT_MESSAGE = "Message content is required"


class Mode(str, Enum):
    OPENAI = "openai"
    GOOGLE = "google"
    ANTHROPIC = "anthropic"
    COMBINED = "combined"

    @classmethod
    def parse(cls, value: Union["Mode", str]) -> "Mode":
        """Return the Mode for ``value``.

        Raises:
            ConfigurationError: If ``value`` names no known mode.
        """
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown model {value!r}") from None

    @property
    def candidates(self) -> tuple[ProviderName, ...]:
        if self is Mode.COMBINED:
            return COMBINED_ORDER
        return (ProviderName(self.value),)


class ConfigurationError(Exception):
    """The request cannot be served with the credentials supplied."""


@dataclass(frozen=True)
class AggregateReply:
    """Final result of one :meth:`Orchestrator.compose` call."""

    text: Optional[str] = None
    error: Optional[str] = None
    # Combined mode only: (label, text) per succeeding provider, in fixed order
    sections: tuple[tuple[str, str], ...] = field(default=(), compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str, sections: tuple[tuple[str, str], ...] = ()) -> "AggregateReply":
        return cls(text=text, sections=sections)

    @classmethod
    def failure(cls, message: str) -> "AggregateReply":
        return cls(error=message)

    def to_payload(self) -> dict:
        if self.ok:
            return {"response": self.text}
        return {"error": True, "message": self.error}


# Outcome of one adapter: its text, or the error it raised
ProviderResult = Union[str, ProviderError]


class Orchestrator:
    """Stateless per call; one instance can serve any number of requests."""

    def __init__(
        self,
        adapters: Optional[Mapping[ProviderName, ProviderAdapter]] = None,
        cfg: AppConfig = default_config,
    ) -> None:
        self._adapters = dict(adapters) if adapters is not None else create_adapters(cfg)

    async def compose(
        self,
        prompt: str,
        mode: Union[Mode, str],
        credentials: Mapping[str, Optional[str]],
    ) -> AggregateReply:
        """Answer ``prompt`` using the providers ``mode`` selects.

        Args:
            prompt:      The user's message.
            mode:        A :class:`Mode` or its string value.
            credentials: Provider name → API key; missing or empty means the
                         provider is unavailable.

        Returns:
            An :class:`AggregateReply`.  Provider failures never escape; they
            become a failed reply (single mode) or are omitted (combined).
        """
        creds = credential_set(credentials)
        try:
            mode = Mode.parse(mode)
            if not prompt or not prompt.strip():
                raise ConfigurationError(EMPTY_PROMPT_MESSAGE)
            selected = self._select(mode, creds)
        except ConfigurationError as exc:
            logger.warning("compose rejected: %s", exc)
            return AggregateReply.failure(str(exc))

        logger.info("compose: mode=%s providers=%s", mode.value, [p.value for p in selected])
        results = await self._dispatch(prompt, selected, creds)

        if mode is Mode.COMBINED:
            return self._fold(results)

        provider, outcome = results[0]
        if isinstance(outcome, ProviderError):
            logger.error("%s failed: %s", provider.label, outcome.message)
            return AggregateReply.failure(outcome.message)
        return AggregateReply.success(outcome)

    def _select(self, mode: Mode, creds: CredentialSet) -> list[ProviderName]:
        if mode is not Mode.COMBINED:
            provider = mode.candidates[0]
            if provider not in creds:
                raise ConfigurationError(f"{provider.label} API key not configured")
            return [provider]

        selected = [p for p in mode.candidates if p in creds]
        if not selected:
            raise ConfigurationError(NO_KEYS_MESSAGE)
        return selected

    async def _dispatch(
        self,
        prompt: str,
        providers: list[ProviderName],
        creds: CredentialSet,
    ) -> list[tuple[ProviderName, ProviderResult]]:
        """Invoke every adapter concurrently and wait for all to settle."""
        settled = await asyncio.gather(
            *(self._adapters[p].invoke(prompt, creds[p]) for p in providers),
            return_exceptions=True,
        )

        results: list[tuple[ProviderName, ProviderResult]] = []
        for provider, outcome in zip(providers, settled):
            if isinstance(outcome, ProviderError):
                results.append((provider, outcome))
            elif isinstance(outcome, Exception):
                logger.exception(
                    "Unexpected %s adapter error", provider.label, exc_info=outcome
                )
                results.append((provider, ProviderError(provider, str(outcome) or repr(outcome))))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append((provider, outcome))
        return results

    @staticmethod
    def _fold(results: list[tuple[ProviderName, ProviderResult]]) -> AggregateReply:
        sections = []
        for provider, outcome in results:
            if isinstance(outcome, ProviderError):
                logger.warning("Combined mode: dropping %s (%s)", provider.label, outcome.message)
                continue
            sections.append((provider.label, outcome))
        if not sections:
            return AggregateReply.success(EMPTY_COMBINED_TEXT)
        text = "\n\n".join(f"{label}: {body}" for label, body in sections)
        return AggregateReply.success(text, tuple(sections))


_default: Optional[Orchestrator] = None


async def compose(
    prompt: str,
    mode: Union[Mode, str],
    credentials: Mapping[str, Optional[str]],
) -> AggregateReply:
    """Module-level shortcut using a lazily built default :class:`Orchestrator`."""
    global _default
    if _default is None:
        _default = Orchestrator()
    return await _default.compose(prompt, mode, credentials)
