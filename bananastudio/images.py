"""
In-memory image handles and the named slots they live in.
"""

import io
import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from PIL import Image

DEFAULT_MIME_TYPE = 'image/png'


class ImageSlot(str, Enum):
    PRODUCT = 'product'
    STYLE = 'style'
    GENERATED = 'generated'


@dataclass(frozen=True)
class ImageHandle:
    """Encoded image bytes plus their MIME type."""
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    @classmethod
    def from_base64(cls, text: str, mime_type: str = DEFAULT_MIME_TYPE) -> 'ImageHandle':
        """
        Build a handle from raw base64 or a data URL

        Args:
            text: base64 payload, optionally prefixed "data:<mime>;base64,"
            mime_type: used when the text carries no MIME type of its own

        Returns:
            ImageHandle

        Raises:
            ValueError: payload is not valid base64
        """
        payload = text.strip()
        if payload.startswith('data:') and ',' in payload:
            header, payload = payload.split(',', 1)
            declared = header[len('data:'):].split(';', 1)[0]
            if declared:
                mime_type = declared
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e
        return cls(data=data, mime_type=mime_type)

    def to_png(self) -> 'ImageHandle':
        """Re-encode as PNG; raises PIL.UnidentifiedImageError on undecodable data."""
        with Image.open(io.BytesIO(self.data)) as img:
            if img.mode not in ('RGB', 'RGBA', 'L', 'LA', 'P'):
                img = img.convert('RGBA')
            buffer = io.BytesIO()
            img.save(buffer, format='PNG', optimize=True)
        return ImageHandle(data=buffer.getvalue(), mime_type='image/png')

    def describe(self) -> Dict[str, Any]:
        try:
            with Image.open(io.BytesIO(self.data)) as img:
                return {
                    'width': img.width,
                    'height': img.height,
                    'format': img.format,
                    'mime_type': self.mime_type,
                    'size_bytes': len(self.data),
                }
        except Exception as e:
            print(f"⚠️ Could not read image: {e}")
            return {}
