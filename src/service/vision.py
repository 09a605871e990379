from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)


INTERIOR_PROMPT = """
Classify the car interior wear level from this photo as one of: good, moderate, poor.
Rules:
- If seats, dashboard, and trims look clean with minimal wear -> good
- Noticeable stains, scuffs, or small tears -> moderate
- Heavy stains, rips, missing panels, severe wear -> poor
Return ONLY JSON like:
{"condition":"good|moderate|poor","reasons":["reason1","reason2"]}
"""


class VisionError(RuntimeError):
    pass


def detect_mime(filename: str) -> str:
    if filename.lower().endswith(".png"):
        return "image/png"
    return "image/jpeg"


class GeminiVisionClient:
    """Async client for the Gemini ``generateContent`` REST endpoint.

    Returns the model's raw text; extracting JSON from it is the caller's job.
    Disabled when no API key is configured.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def generate(self, image: bytes, mime_type: str, prompt: str) -> str:
        if not self.enabled:
            raise VisionError("GEMINI_API_KEY not configured")

        payload = {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": mime_type, "data": base64.b64encode(image).decode("ascii")}},
                        {"text": prompt},
                    ]
                }
            ]
        }
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, params={"key": self.api_key}, json=payload)
                resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise VisionError(f"Vision request failed: {exc}") from exc
        return _response_text(data)

    async def classify_interior(self, image_path: Path) -> str:
        image = image_path.read_bytes()
        logger.info(
            "Classifying interior wear",
            extra={"extra_data": {"file": image_path.name, "model": self.model, "bytes": len(image)}},
        )
        return await self.generate(image, detect_mime(image_path.name), INTERIOR_PROMPT)


def _response_text(data: Any) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(p.get("text", "") for p in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise VisionError("Vision response has no candidate text") from exc
    if not text:
        raise VisionError("Vision response has no candidate text")
    return text
