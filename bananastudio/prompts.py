"""
Instruction templates for the scene description and render requests.
"""

from .settings import StudioSettings

FALLBACK_SCENE_PROMPT = "A professional product photo in a high-end studio."

# Sent to the description model together with the product (and style) image
SCENE_DIRECTOR_PROMPT = """You are an expert commercial photography director.
TASK: Analyze the PRODUCT in the first image and the ENVIRONMENT/STYLE in the second image (if provided).

SETTINGS:
- Aspect Ratio: {aspect_ratio}
- Lighting: {lighting}
- Perspective: {perspective}

INSTRUCTIONS:
1. If a style reference is provided, describe its background, surfaces, props, and lighting in extreme detail.
2. Explicitly describe how the product from the first image should be placed into the scene of the second image.
3. Ensure the prompt mandates that the result looks EXACTLY like the style reference's context, with the product swapped in.
4. Focus on shadows, reflections, and material interactions to ensure the product looks physically present in that specific environment.

Output ONLY the descriptive scene prompt."""

# Render instruction when a style reference is attached as the second image
STYLE_CLONE_INSTRUCTION = """IMAGE 1 is the product. IMAGE 2 is the EXACT style and environment.
ACTION: Place the product from Image 1 into the exact scene, lighting, and background of Image 2.
The final image must be a perfect aesthetic clone of Image 2 but featuring the product from Image 1.
SCENE DESCRIPTION: {scene}"""

STUDIO_INSTRUCTION = "Render this product in a professional studio setting. SCENE DESCRIPTION: {scene}"


def build_director_prompt(settings: StudioSettings) -> str:
    return SCENE_DIRECTOR_PROMPT.format(
        aspect_ratio=settings.aspect_ratio.value,
        lighting=settings.lighting.value,
        perspective=settings.perspective.value,
    )


def build_render_instruction(scene: str, has_style_reference: bool) -> str:
    template = STYLE_CLONE_INSTRUCTION if has_style_reference else STUDIO_INSTRUCTION
    return template.format(scene=scene)
