"""
Gemini client access and response helpers.
"""

from typing import Optional

from google import genai

from .config import get_gemini_api_key
from .errors import GeminiConfigurationError
from .images import ImageHandle, DEFAULT_MIME_TYPE


def get_gemini_client() -> genai.Client:
    api_key = get_gemini_api_key()
    if not api_key:
        raise GeminiConfigurationError("GEMINI_API_KEY is not set")
    return genai.Client(api_key=api_key)


def iter_response_parts(response):
    """
    Normalize response parts across google-genai SDK versions.

    Some versions expose `response.parts`; others only
    `response.candidates[0].content.parts`.
    """
    if response is None:
        return []
    parts = getattr(response, "parts", None)
    if parts is not None:
        return parts
    candidates = getattr(response, "candidates", None)
    if candidates:
        content = getattr(candidates[0], "content", None)
        if content is not None:
            return getattr(content, "parts", None) or []
    return []


def first_inline_image(response) -> Optional[ImageHandle]:
    """Return the first inline image payload of a response, if any."""
    for part in iter_response_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is None or not getattr(inline, "data", None):
            continue
        return ImageHandle(data=inline.data, mime_type=getattr(inline, "mime_type", None) or DEFAULT_MIME_TYPE)
    return None
