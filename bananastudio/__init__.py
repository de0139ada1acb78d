"""
BananaStudio
Product photo staging on top of Google Gemini: derive a scene prompt from a
product shot (and an optional style reference), then render the product into it.
"""

from .settings import AspectRatio, LightingStyle, CameraPerspective, StudioSettings
from .images import ImageHandle, ImageSlot
from .controller import StudioController, ControllerRegistry

__all__ = [
    'AspectRatio', 'LightingStyle', 'CameraPerspective', 'StudioSettings',
    'ImageHandle', 'ImageSlot', 'StudioController', 'ControllerRegistry',
]
