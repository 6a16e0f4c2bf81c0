"""
AI Adapter module - Provider abstraction layer.

Supports:
- Google Gemini (generateContent)
"""
from fitdash.services.adapter.provider import (
    AIProviderAdapter,
    AIProviderError,
    GeminiAdapter,
    get_ai_adapter,
)

__all__ = [
    "AIProviderAdapter",
    "AIProviderError",
    "GeminiAdapter",
    "get_ai_adapter",
]
