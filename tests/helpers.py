import io

from google.genai import types
from PIL import Image

from bananastudio.images import ImageHandle


def make_image_bytes(color=(200, 30, 30), size=(8, 8), fmt='PNG'):
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_handle(color=(200, 30, 30), fmt='PNG', mime_type='image/png'):
    return ImageHandle(data=make_image_bytes(color, fmt=fmt), mime_type=mime_type)


def text_response(text):
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role='model', parts=[types.Part(text=text)])),
    ])


def image_response(*images, text=None):
    parts = []
    if text is not None:
        parts.append(types.Part(text=text))
    for data, mime_type in images:
        parts.append(types.Part.from_bytes(data=data, mime_type=mime_type))
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role='model', parts=parts)),
    ])


class FakeModels:
    """Stands in for `client.models`; records every generate_content call."""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeClient:
    def __init__(self, responses=None, error=None):
        self.models = FakeModels(responses, error)

    @property
    def calls(self):
        return self.models.calls


def request_parts(call):
    """Parts of the single user Content sent in a recorded call."""
    contents = call['contents']
    assert len(contents) == 1
    return contents[0].parts
