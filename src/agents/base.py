"""Abstract provider adapter interface.

Every LLM integration implements :class:`ProviderAdapter` so the orchestrator
can fan a prompt out to any of them without knowing which SDK sits behind it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from config import AppConfig, config as default_config


class ProviderName(str, Enum):
    """The closed set of supported providers."""

    OPENAI = "openai"
    GOOGLE = "google"
    ANTHROPIC = "anthropic"

    @property
    def label(self) -> str:
        """Display name used in reply prefixes and error messages."""
        return _LABELS[self]


_LABELS = {
    ProviderName.OPENAI: "OpenAI",
    ProviderName.GOOGLE: "Google",
    ProviderName.ANTHROPIC: "Anthropic",
}


class ProviderError(Exception):
    """Raised by adapters on any failure talking to their provider."""

    def __init__(self, provider: ProviderName, message: str) -> None:
        super().__init__(message)
        self.provider = provider
        self.message = message


class ProviderTransportError(ProviderError):
    """The request never produced a response (network, DNS, timeout)."""


class ProviderRemoteError(ProviderError):
    """The provider answered with a structured error body."""


class ProviderAdapter(ABC):
    """Translate a prompt into one provider call and return its text.

    Subclasses supply :meth:`_call` (build the request, perform exactly one
    outbound call, map SDK exceptions to :class:`ProviderError`) and
    :meth:`_extract_text` (pull the reply out of the success envelope).
    """

    provider: ProviderName

    def __init__(self, cfg: AppConfig = default_config) -> None:
        self._cfg = cfg

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent with every request."""
        ...

    @property
    def name(self) -> str:
        return f"{self.provider.value}/{self.model}"

    @property
    def no_response_text(self) -> str:
        return f"No response from {self.provider.label}"

    async def invoke(self, prompt: str, credential: str) -> str:
        """Send ``prompt`` to the provider and return its reply text.

        A success envelope without the expected text field yields
        :attr:`no_response_text` instead of an error.

        Raises:
            ValueError: If ``prompt`` or ``credential`` is empty.
            ProviderError: On transport failure or a provider-reported error.
        """
        if not prompt:
            raise ValueError("prompt must be a non-empty string")
        if not credential:
            raise ValueError(f"no credential supplied for {self.provider.value}")

        response = await self._call(prompt, credential)
        try:
            text = self._extract_text(response)
        except (AttributeError, IndexError, KeyError, TypeError):
            text = None
        return text if text else self.no_response_text

    @abstractmethod
    async def _call(self, prompt: str, credential: str) -> Any:
        ...

    @abstractmethod
    def _extract_text(self, response: Any) -> str | None:
        ...

    def _remote_message(self, exc: Exception) -> str:
        """Format a provider error body as ``"<Provider> error: <text>"``."""
        detail = None
        body = getattr(exc, "body", None)
        if isinstance(body, dict):
            inner = body.get("error", body)
            if isinstance(inner, dict):
                detail = inner.get("message")
        if not detail:
            detail = getattr(exc, "message", None) or str(exc)
        return f"{self.provider.label} error: {detail}"
