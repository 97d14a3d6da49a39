"""Anthropic Messages API adapter (Claude Haiku)."""
import anthropic

from src.agents.base import (
    ProviderAdapter,
    ProviderName,
    ProviderRemoteError,
    ProviderTransportError,
)


class AnthropicAdapter(ProviderAdapter):
    """Anthropic provider using the async client, user turn only."""

    provider = ProviderName.ANTHROPIC

    @property
    def model(self) -> str:
        return self._cfg.anthropic_model

    async def _call(self, prompt: str, credential: str):
        client = anthropic.AsyncAnthropic(
            api_key=credential,
            max_retries=0,
            default_headers={"anthropic-version": self._cfg.anthropic_version},
        )
        try:
            return await client.messages.create(
                model=self.model,
                max_tokens=self._cfg.anthropic_max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIConnectionError as exc:
            raise ProviderTransportError(self.provider, str(exc)) from exc
        except anthropic.APIError as exc:
            raise ProviderRemoteError(self.provider, self._remote_message(exc)) from exc
        finally:
            await client.close()

    def _extract_text(self, response) -> str | None:
        return response.content[0].text
