"""
AI Provider Adapter - text-generation endpoint abstraction.
Supports Google Gemini's generateContent API.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from fitdash.core.config import Settings, settings as default_settings
from fitdash.core.logging import get_logger, AIDebugLogger

logger = get_logger(__name__)
debug_logger = AIDebugLogger(logger)


# Provider configurations
PROVIDER_CONFIG = {
    "gemini": {
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "default_model": "gemini-2.5-flash-preview-05-20",
    },
}


class AIProviderError(Exception):
    """The text-generation request failed or returned a non-success status."""


class AIProviderAdapter(ABC):
    """Abstract base class for text-generation adapters."""

    def __init__(self, api_key: str, base_url: str | None = None, model: str | None = None):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.provider_name = "unknown"

    @abstractmethod
    async def generate(self, prompt: str) -> dict[str, Any]:
        """
        Send one prompt and return the decoded response body.

        Raises:
            AIProviderError: transport failure, timeout or non-success status
        """
        pass


class GeminiAdapter(AIProviderAdapter):
    """Adapter for Google Gemini API."""

    def __init__(
        self,
        api_key: str,
        model: str = PROVIDER_CONFIG["gemini"]["default_model"],
        base_url: str = PROVIDER_CONFIG["gemini"]["base_url"],
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, base_url, model)
        self.provider_name = "gemini"
        self.timeout = timeout
        self._transport = transport

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    async def generate(self, prompt: str) -> dict[str, Any]:
        """Send a single generateContent request. No retries."""
        endpoint = f"{self.base_url}/models/{self.model}:generateContent"

        with debug_logger.track_call(
            provider=self.provider_name,
            model=self.model,
            endpoint="generateContent"
        ) as call:
            call.set_prompt(prompt)

            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.post(
                        endpoint,
                        headers={"Content-Type": "application/json"},
                        params={"key": self.api_key},
                        json=self.build_request_body(prompt),
                    )
            except httpx.TimeoutException:
                call.set_error("timeout", f"Request timed out after {self.timeout}s")
                raise AIProviderError("AI request timed out")
            except httpx.HTTPError as e:
                call.set_error("transport", str(e))
                raise AIProviderError(f"AI request failed: {e}") from e

            call.set_response(response.status_code, response.text)

            if not response.is_success:
                call.set_error("api_error", f"HTTP {response.status_code}")
                raise AIProviderError(
                    f"API request failed with status {response.status_code}"
                )

            try:
                return response.json()
            except ValueError as e:
                call.set_error("invalid_json", str(e))
                raise AIProviderError("AI response is not valid JSON") from e


def get_ai_adapter(config: Settings = default_settings) -> AIProviderAdapter:
    """
    Factory function to get the configured text-generation adapter.

    Raises:
        ValueError: unknown provider or missing API key
    """
    provider = config.AI_PROVIDER.lower()

    if provider not in PROVIDER_CONFIG:
        raise ValueError(f"Unsupported AI provider '{provider}'")

    # Get provider-specific API key or fall back to generic key
    api_key = config.get_api_key(provider)

    if not api_key:
        raise ValueError(
            f"API key not set for provider '{provider}'. "
            f"Set {provider.upper()}_API_KEY or AI_API_KEY environment variable."
        )

    provider_config = PROVIDER_CONFIG[provider]
    base_url = config.AI_BASE_URL or provider_config["base_url"]
    model = config.AI_MODEL or provider_config["default_model"]

    logger.info(
        "Initializing AI adapter",
        provider=provider,
        model=model,
    )

    return GeminiAdapter(
        api_key=api_key,
        model=model,
        base_url=base_url,
        timeout=config.AI_TIMEOUT,
    )
