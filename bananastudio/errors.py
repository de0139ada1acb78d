"""
Exceptions raised by the synthesis clients and the settings model.
"""


class StudioError(Exception):
    """Base class for BananaStudio failures."""


class GeminiConfigurationError(StudioError):
    """Raised when no Gemini API key is configured."""


class InvalidSettingError(StudioError, ValueError):
    """Raised when a studio setting is not one of its enumerated values."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value!r}")


class PromptSynthesisError(StudioError):
    """The scene description request could not be completed."""


class ImageSynthesisError(StudioError):
    """The image generation request could not be completed."""


class NoImageDataError(ImageSynthesisError):
    """The image model answered without any inline image payload."""

    def __init__(self, message: str = "No image data returned from model."):
        super().__init__(message)
