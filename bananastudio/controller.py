"""
Orchestration controller
Owns the studio state for one browser session and sequences the two
synthesis calls. Every UI intent maps to one method here; the page only reads
snapshots.

Prompt synthesis and image synthesis write disjoint fields and are never
cancelled by one another. If both are triggered at once they may complete in
either order.
"""

import copy
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from .images import ImageHandle, ImageSlot
from .image_synthesis import generate_image
from .prompt_synthesis import generate_detailed_prompt
from .settings import StudioSettings

PROMPT_FAILURE_MESSAGE = "Failed to generate prompt. Please try again."
IMAGE_FAILURE_MESSAGE = "Generation failed. Ensure your images are clear."


@dataclass
class ProcessingState:
    prompt_in_flight: bool = False
    image_in_flight: bool = False
    error: Optional[str] = None


@dataclass
class StudioState:
    product: Optional[ImageHandle] = None
    style: Optional[ImageHandle] = None
    generated: Optional[ImageHandle] = None
    settings: StudioSettings = field(default_factory=StudioSettings)
    prompt: str = ""
    processing: ProcessingState = field(default_factory=ProcessingState)
    # Bumped on every mutation so the page can cache-bust slot images
    revision: int = 0

    def image(self, slot: ImageSlot) -> Optional[ImageHandle]:
        return getattr(self, ImageSlot(slot).value)

    def to_dict(self) -> Dict[str, Any]:
        images = {}
        for slot in ImageSlot:
            handle = self.image(slot)
            images[slot.value] = handle.describe() if handle is not None else None
        return {
            'images': images,
            'settings': self.settings.to_dict(),
            'prompt': self.prompt,
            'processing': {
                'prompt_in_flight': self.processing.prompt_in_flight,
                'image_in_flight': self.processing.image_in_flight,
                'error': self.processing.error,
            },
            'can_generate_prompt': self.product is not None and not self.processing.prompt_in_flight,
            'can_generate_image': (self.product is not None and bool(self.prompt.strip())
                                   and not self.processing.image_in_flight),
            'revision': self.revision,
        }


class StudioController:
    """Single writer of a StudioState."""

    def __init__(self,
                 prompt_service: Callable[..., str] = generate_detailed_prompt,
                 image_service: Callable[..., ImageHandle] = generate_image,
                 client=None):
        self._prompt_service = prompt_service
        self._image_service = image_service
        self._client = client
        self._state = StudioState()
        self._lock = threading.Lock()

    def _touch(self):
        self._state.revision += 1

    def snapshot(self) -> StudioState:
        with self._lock:
            return copy.deepcopy(self._state)

    # --- synchronous edits -------------------------------------------------

    def upload_image(self, slot, image: ImageHandle) -> None:
        slot = ImageSlot(slot)
        if slot is ImageSlot.GENERATED:
            raise ValueError("The generated slot is written only by image synthesis")
        with self._lock:
            setattr(self._state, slot.value, image)
            self._touch()

    def clear_image(self, slot) -> None:
        slot = ImageSlot(slot)
        with self._lock:
            setattr(self._state, slot.value, None)
            self._touch()

    def new_shoot(self) -> None:
        self.clear_image(ImageSlot.GENERATED)

    def update_settings(self, **changes) -> StudioSettings:
        with self._lock:
            self._state.settings = self._state.settings.with_changes(**changes)
            self._touch()
            return self._state.settings

    def set_prompt(self, text: str) -> None:
        with self._lock:
            self._state.prompt = text or ""
            self._touch()

    def download(self) -> Optional[bytes]:
        with self._lock:
            generated = self._state.generated
        return generated.data if generated is not None else None

    # --- synthesis ---------------------------------------------------------

    def generate_prompt(self) -> bool:
        """
        Ask the description model for a scene prompt

        Returns:
            bool: False when the guard refused (no product image, or a prompt
            request already running); True once the attempt has finished
        """
        with self._lock:
            state = self._state
            if state.product is None or state.processing.prompt_in_flight:
                return False
            state.processing.error = None
            state.processing.prompt_in_flight = True
            self._touch()
            settings, product, style = state.settings, state.product, state.style

        try:
            text = self._prompt_service(settings, product, style, client=self._client)
        except Exception as e:
            print(f"❌ Prompt synthesis failed: {e}")
            with self._lock:
                self._state.processing.error = PROMPT_FAILURE_MESSAGE
                self._state.processing.prompt_in_flight = False
                self._touch()
            return True

        with self._lock:
            self._state.prompt = text
            self._state.processing.prompt_in_flight = False
            self._touch()
        return True

    def generate_image(self) -> bool:
        """
        Render the product into the scene described by the current prompt

        Returns:
            bool: False when the guard refused (no product image, empty prompt,
            or a render already running); True once the attempt has finished
        """
        with self._lock:
            state = self._state
            if state.product is None or not state.prompt.strip() or state.processing.image_in_flight:
                return False
            state.processing.error = None
            state.processing.image_in_flight = True
            self._touch()
            prompt, product, style = state.prompt, state.product, state.style
            aspect_ratio = state.settings.aspect_ratio

        try:
            result = self._image_service(prompt, product, aspect_ratio, style, client=self._client)
        except Exception as e:
            print(f"❌ Image synthesis failed: {e}")
            with self._lock:
                self._state.processing.error = IMAGE_FAILURE_MESSAGE
                self._state.processing.image_in_flight = False
                self._touch()
            return True

        with self._lock:
            self._state.generated = result
            self._state.processing.image_in_flight = False
            self._touch()
        return True


class ControllerRegistry:
    """
    One controller per browser session, kept in memory.

    Sessions idle for longer than `idle_timeout` seconds are dropped, and at
    most `max_sessions` controllers are held; the least recently used one is
    dropped first.
    """

    def __init__(self, factory: Callable[[], StudioController] = StudioController,
                 max_sessions: int = 100, idle_timeout: float = 3600,
                 clock: Callable[[], float] = time.monotonic):
        self._factory = factory
        self._max_sessions = max_sessions
        self._idle_timeout = idle_timeout
        self._clock = clock
        # session id -> (controller, last access), oldest access first
        self._controllers: "OrderedDict[str, Tuple[StudioController, float]]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def _evict_idle(self, now: float) -> None:
        while self._controllers:
            session_id, (_, last_seen) = next(iter(self._controllers.items()))
            if now - last_seen <= self._idle_timeout:
                break
            del self._controllers[session_id]
            print(f"🧹 Dropped idle studio session {session_id[:8]}")

    def get(self, session_id: str, create: bool = True) -> Optional[StudioController]:
        """
        Controller for a session, refreshing its last access time

        Args:
            session_id: id stored in the browser session
            create: build a controller when the session has none

        Returns:
            StudioController, or None when create is False and none exists
        """
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            entry = self._controllers.pop(session_id, None)
            if entry is None:
                if not create:
                    return None
                controller = self._factory()
            else:
                controller = entry[0]
            self._controllers[session_id] = (controller, now)
            while len(self._controllers) > self._max_sessions:
                dropped_id, _ = self._controllers.popitem(last=False)
                print(f"🧹 Session limit reached, dropped studio session {dropped_id[:8]}")
            return controller

    def __len__(self):
        with self._lock:
            return len(self._controllers)
