from __future__ import annotations

import asyncio
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import Settings
from ..errors import AIProviderError
from ..utils.logging import get_logger

# google-genai switches its async transport to aiohttp when it is installed
try:
    import aiohttp
except ImportError:
    aiohttp = None

logger = get_logger(__name__)

TRANSPORT_ERRORS = (httpx.HTTPError, asyncio.TimeoutError)
if aiohttp is not None:
    TRANSPORT_ERRORS += (aiohttp.ClientError,)


class GeminiClient:
    """
    Thin wrapper around the Gemini text-completion call.

    Only transport and provider failures are handled here; what the model
    writes back is returned untouched for the caller to parse. One instance
    is shared per process and closed on shutdown.
    """

    def __init__(self, api_key: str, model: str, timeout_seconds: float = 60.0):
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._api_key = api_key
        self._client: Optional[genai.Client] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout_seconds=settings.ai_timeout_seconds,
        )

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise AIProviderError(details="GEMINI_API_KEY is not set")
            self._client = genai.Client(
                api_key=self._api_key,
                # HttpOptions.timeout is in milliseconds
                http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except genai_errors.APIError as e:
            logger.warning("Gemini API error (model=%s): %s", self.model, e)
            raise AIProviderError(details=str(e)) from e
        except TRANSPORT_ERRORS as e:
            logger.warning("Gemini transport error (model=%s): %r", self.model, e)
            raise AIProviderError(details=repr(e)) from e

        return response.text or ""

    async def aclose(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aio.aclose()
