"""Google Gemini adapter using the google-genai SDK."""
import asyncio
import logging

import aiohttp
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.agents.base import (
    ProviderAdapter,
    ProviderName,
    ProviderRemoteError,
    ProviderTransportError,
)

logger = logging.getLogger(__name__)

# The SDK surfaces transport failures as raw httpx (or aiohttp) errors
_TRANSPORT_ERRORS = (httpx.HTTPError, aiohttp.ClientError, OSError, asyncio.TimeoutError)


class GoogleAdapter(ProviderAdapter):
    """Calls Gemini generate-content via the native async client."""

    provider = ProviderName.GOOGLE

    @property
    def model(self) -> str:
        return self._cfg.google_model

    async def _call(self, prompt: str, credential: str):
        contents = [types.Content(role="user", parts=[types.Part(text=prompt)])]
        generation_config = types.GenerateContentConfig(temperature=self._cfg.temperature)
        client = genai.Client(api_key=credential)
        try:
            return await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=generation_config,
            )
        except genai_errors.APIError as exc:
            raise ProviderRemoteError(self.provider, self._remote_message(exc)) from exc
        except _TRANSPORT_ERRORS as exc:
            logger.warning("Gemini transport failure: %r", exc)
            raise ProviderTransportError(self.provider, str(exc) or repr(exc)) from exc
        finally:
            await client.aio.aclose()

    def _extract_text(self, response) -> str | None:
        return response.candidates[0].content.parts[0].text
