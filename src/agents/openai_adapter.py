"""OpenAI chat-completions adapter (GPT-4o-mini)."""
import logging

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from src.agents.base import (
    ProviderAdapter,
    ProviderName,
    ProviderRemoteError,
    ProviderTransportError,
)

logger = logging.getLogger(__name__)


class OpenAIAdapter(ProviderAdapter):
    """Calls OpenAI with a fixed system framing and temperature."""

    provider = ProviderName.OPENAI

    @property
    def model(self) -> str:
        return self._cfg.openai_model

    async def _call(self, prompt: str, credential: str):
        # max_retries=0: one outbound call per invocation
        client = AsyncOpenAI(api_key=credential, max_retries=0)
        try:
            return await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self._cfg.openai_system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._cfg.temperature,
            )
        except APIConnectionError as exc:
            raise ProviderTransportError(self.provider, str(exc)) from exc
        except APIStatusError as exc:
            raise ProviderRemoteError(self.provider, self._remote_message(exc)) from exc
        except OpenAIError as exc:
            raise ProviderRemoteError(self.provider, self._remote_message(exc)) from exc
        finally:
            await client.close()

    def _extract_text(self, response) -> str | None:
        return response.choices[0].message.content
