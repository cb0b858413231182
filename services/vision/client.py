"""
Vision model client.

One chat-completions call per media attachment.
No response parsing. No retries.
"""

import logging
from typing import Any

import httpx

from .prompts import select_prompt

logger = logging.getLogger(__name__)


class VisionError(Exception):
    """Vision model call failed."""
    pass


def build_vision_request(attachment: dict[str, Any], model: str) -> dict[str, Any]:
    """
    Build the chat-completions request for one media-channel message.

    Args:
        attachment: Media channel payload (MediaUrl, Body, ...)
        model: Vision-capable model name
    """
    return {
        "model": model,
        "max_tokens": 1024,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": select_prompt(attachment.get("Body"))},
                    {
                        "type": "image_url",
                        "image_url": {"url": attachment["MediaUrl"], "detail": "low"},
                    },
                ],
            }
        ],
    }


class OpenAIVisionClient:
    """OpenAI-compatible chat-completions client for image analysis."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout_s: float = 60.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    async def analyze(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Send the request and return the raw completion JSON.

        Raises:
            VisionError: on HTTP failure or non-200 status
        """
        if not self.api_key:
            raise VisionError("OPENAI_API_KEY not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=request,
                    headers=headers,
                    timeout=self.timeout_s,
                )
        except httpx.RequestError as e:
            raise VisionError(f"HTTP request failed: {e}")

        if response.status_code != 200:
            logger.error(
                f"Vision API error: {response.status_code} - {response.text}",
                extra={"status_code": response.status_code},
            )
            raise VisionError(f"Vision API returned {response.status_code}")

        return response.json()
