"""Vision model boundary exports."""

from .client import OpenAIVisionClient, VisionError, build_vision_request
from .prompts import DEFAULT_PROMPT_KEY, MEDIA_PROMPTS, select_prompt

__all__ = [
    "OpenAIVisionClient",
    "VisionError",
    "build_vision_request",
    "DEFAULT_PROMPT_KEY",
    "MEDIA_PROMPTS",
    "select_prompt",
]
