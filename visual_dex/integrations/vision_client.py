"""
Object labeling through the Google Cloud Vision annotate API.

Sends one image per request with LABEL_DETECTION and maxResults=1 and
returns the top label lower-cased. Every transport or service failure is
reported as "no label" so the caller can show a plain "not found" message.
"""

from __future__ import annotations

import base64
from typing import Any, Protocol

import httpx
from loguru import logger

DEFAULT_VISION_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"


class VisionLabeler(Protocol):
    """Anything that can name the main object in an image."""

    async def detect_label(self, image: bytes) -> str | None: ...


class GoogleVisionClient:
    """HTTP client for the images:annotate endpoint."""

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_VISION_ENDPOINT,
        timeout_seconds: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the vision client.

        Args:
            api_key: Google Cloud API key
            endpoint: annotate endpoint URL
            timeout_seconds: Request timeout
            client: Pre-built AsyncClient (tests inject a MockTransport here)
        """
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Any) -> GoogleVisionClient:
        return cls(
            api_key=settings.vision_api_key,
            endpoint=settings.vision_endpoint,
            timeout_seconds=settings.vision_timeout_seconds,
        )

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds))
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def build_request(image: bytes) -> dict[str, Any]:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image).decode("ascii")},
                    "features": [{"type": "LABEL_DETECTION", "maxResults": 1}],
                }
            ]
        }

    @staticmethod
    def parse_label(data: Any) -> str | None:
        """Pull the top label description out of an annotate response."""
        try:
            annotations = data["responses"][0].get("labelAnnotations") or []
        except (KeyError, IndexError, TypeError, AttributeError):
            return None
        if not annotations:
            return None
        description = annotations[0].get("description")
        if not isinstance(description, str) or not description.strip():
            return None
        return description.strip().lower()

    async def detect_label(self, image: bytes) -> str | None:
        if not image:
            return None
        if not self.api_key:
            logger.warning("Vision API key not configured")
            return None

        client = await self._ensure_client()
        try:
            response = await client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_request(image),
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Vision labeling failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Vision response is not valid JSON: {e}")
            return None

        label = self.parse_label(data)
        if label is None:
            logger.info("Vision service returned no label")
        else:
            logger.debug(f"Vision label: {label}")
        return label
