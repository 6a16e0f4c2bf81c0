# -*- coding: utf-8 -*-
"""Test doubles shared across test modules."""

from __future__ import annotations

from io import BytesIO
from typing import Any, List, Optional

from PIL import Image

from fitdash.services.adapter import AIProviderAdapter, AIProviderError
from fitdash.services.identity import Identity, IdentityError, IdentityProvider
from fitdash.services.store import MemoryDocumentStore


def gemini_body(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeAdapter(AIProviderAdapter):
    """Records prompts and returns a canned body, or raises."""

    def __init__(self, body: Optional[dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        super().__init__(api_key="test", model="fake")
        self.provider_name = "fake"
        self.body = body if body is not None else gemini_body("Keep going!\n\nEat more protein.")
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> dict[str, Any]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.body


class FailingAdapter(FakeAdapter):
    def __init__(self) -> None:
        super().__init__(error=AIProviderError("API request failed with status 500"))


class FailingWriteStore(MemoryDocumentStore):
    """Reads work, every write fails."""

    async def _write(self, key: str, data: dict, merge: bool) -> None:
        raise ConnectionError("store unreachable")


class FailingIdentityProvider(IdentityProvider):
    async def sign_in_anonymous(self) -> Identity:
        raise IdentityError("identity service unreachable")


def png_bytes(width: int = 40, height: int = 20) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color=(31, 41, 55)).save(buffer, format="PNG")
    return buffer.getvalue()
