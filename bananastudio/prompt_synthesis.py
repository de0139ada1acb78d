"""
Scene prompt synthesis: asks the description model to write the scene prompt
for a product shot, optionally cloned from a style reference.
"""

import traceback
from typing import Optional

from .config import get_text_model
from .errors import PromptSynthesisError
from .gemini import get_gemini_client
from .images import ImageHandle
from .parts import SynthesisRequest
from .prompts import FALLBACK_SCENE_PROMPT, build_director_prompt
from .settings import StudioSettings


def build_prompt_request(settings: StudioSettings, product_image: ImageHandle,
                         style_image: Optional[ImageHandle] = None) -> SynthesisRequest:
    request = SynthesisRequest(model=get_text_model())
    request.add_text(build_director_prompt(settings))
    request.add_image(product_image)
    request.add_image(style_image)
    return request


def generate_detailed_prompt(settings: StudioSettings, product_image: ImageHandle,
                             style_image: Optional[ImageHandle] = None, client=None) -> str:
    """
    Generate a detailed scene prompt, treating the style reference as the target scene

    Args:
        settings: studio settings to fold into the instruction
        product_image: the product photo (image 1)
        style_image: optional style reference (image 2)
        client: Gemini client; created from the environment when omitted

    Returns:
        str: the model's scene description, or the fallback prompt when it returned no text

    Raises:
        PromptSynthesisError: the request could not be completed
    """
    request = build_prompt_request(settings, product_image, style_image)
    print(f"🎨 Generating scene prompt (model={request.model}, style_reference={style_image is not None})")
    try:
        if client is None:
            client = get_gemini_client()
        response = request.send(client)
    except Exception as e:
        print(f"❌ Scene prompt request failed: {e}")
        print(traceback.format_exc())
        raise PromptSynthesisError(str(e)) from e

    text = getattr(response, "text", None)
    if not text:
        print("⚠️ Description model returned no text, using fallback prompt")
        return FALLBACK_SCENE_PROMPT
    print(f"✅ Scene prompt generated ({len(text)} chars)")
    return text
