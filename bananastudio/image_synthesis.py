"""
Final render: composites the product into the described scene.
"""

import traceback
from typing import Optional

from .config import get_image_model
from .errors import ImageSynthesisError, NoImageDataError
from .gemini import get_gemini_client, first_inline_image
from .images import ImageHandle
from .parts import SynthesisRequest
from .prompts import build_render_instruction
from .settings import AspectRatio


def build_render_request(prompt: str, product_image: ImageHandle, aspect_ratio,
                         style_image: Optional[ImageHandle] = None) -> SynthesisRequest:
    # Image 1 is always the product; image 2 (if any) is the scene to clone
    request = SynthesisRequest(model=get_image_model(), aspect_ratio=AspectRatio(aspect_ratio).value)
    request.add_image(product_image)
    request.add_image(style_image)
    request.add_text(build_render_instruction(prompt, has_style_reference=style_image is not None))
    return request


def generate_image(prompt: str, product_image: ImageHandle, aspect_ratio,
                   style_image: Optional[ImageHandle] = None, client=None) -> ImageHandle:
    """
    Render the product into the described scene

    Args:
        prompt: scene description
        product_image: the product photo
        aspect_ratio: one of the AspectRatio values
        style_image: optional style reference to clone
        client: Gemini client; created from the environment when omitted

    Returns:
        ImageHandle: the rendered image as PNG

    Raises:
        NoImageDataError: the response carried no inline image
        ImageSynthesisError: the request failed
    """
    request = build_render_request(prompt, product_image, aspect_ratio, style_image)
    print(f"🎨 Rendering (model={request.model}, aspect_ratio={request.aspect_ratio}, "
          f"style_reference={style_image is not None})")
    try:
        if client is None:
            client = get_gemini_client()
        response = request.send(client)
    except Exception as e:
        print(f"❌ Render request failed: {e}")
        print(traceback.format_exc())
        raise ImageSynthesisError(str(e)) from e

    image = first_inline_image(response)
    if image is None:
        print("❌ Render response contained no image data")
        raise NoImageDataError()

    try:
        rendered = image.to_png()
    except Exception as e:
        raise ImageSynthesisError(f"Returned image could not be decoded: {e}") from e
    print(f"✅ Render complete ({len(rendered.data)} bytes)")
    return rendered
