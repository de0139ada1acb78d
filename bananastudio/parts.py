"""
Typed request parts sent to Gemini.
A SynthesisRequest is assembled from TextPart / ImagePart values and only
converted to google-genai objects right before the call.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from google.genai import types

from .images import ImageHandle


@dataclass(frozen=True)
class TextPart:
    text: str

    def to_genai(self) -> types.Part:
        return types.Part.from_text(text=self.text)


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str

    @classmethod
    def from_handle(cls, image: ImageHandle) -> 'ImagePart':
        return cls(data=image.data, mime_type=image.mime_type)

    def to_genai(self) -> types.Part:
        return types.Part.from_bytes(data=self.data, mime_type=self.mime_type)


RequestPart = Union[TextPart, ImagePart]


@dataclass
class SynthesisRequest:
    model: str
    parts: List[RequestPart] = field(default_factory=list)
    aspect_ratio: Optional[str] = None

    def add_text(self, text: str) -> 'SynthesisRequest':
        self.parts.append(TextPart(text))
        return self

    def add_image(self, image: Optional[ImageHandle]) -> 'SynthesisRequest':
        if image is not None:
            self.parts.append(ImagePart.from_handle(image))
        return self

    def contents(self) -> List[types.Content]:
        return [types.Content(role='user', parts=[p.to_genai() for p in self.parts])]

    def config(self) -> Optional[types.GenerateContentConfig]:
        if not self.aspect_ratio:
            return None
        return types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
        )

    def send(self, client):
        """Issue the request through `client.models.generate_content`."""
        config = self.config()
        if config is not None:
            return client.models.generate_content(model=self.model, contents=self.contents(), config=config)
        return client.models.generate_content(model=self.model, contents=self.contents())
