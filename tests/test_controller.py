import itertools
import threading
import unittest

from bananastudio.controller import (
    IMAGE_FAILURE_MESSAGE, PROMPT_FAILURE_MESSAGE, ControllerRegistry, StudioController,
)
from bananastudio.errors import NoImageDataError, PromptSynthesisError
from bananastudio.images import ImageSlot
from bananastudio.settings import AspectRatio, CameraPerspective, LightingStyle
from tests.helpers import FakeClient, image_response, make_handle, make_image_bytes, text_response


class RecordingServices:
    """Fake prompt/image services that record their arguments."""

    def __init__(self, prompt_result="A scene.", image_result=None, prompt_error=None, image_error=None):
        self.prompt_result = prompt_result
        self.image_result = image_result if image_result is not None else make_handle((0, 255, 0))
        self.prompt_error = prompt_error
        self.image_error = image_error
        self.prompt_calls = []
        self.image_calls = []

    def prompt(self, settings, product, style, client=None):
        self.prompt_calls.append((settings, product, style))
        if self.prompt_error:
            raise self.prompt_error
        return self.prompt_result

    def image(self, prompt, product, aspect_ratio, style, client=None):
        self.image_calls.append((prompt, product, aspect_ratio, style))
        if self.image_error:
            raise self.image_error
        return self.image_result


def make_controller(services):
    return StudioController(prompt_service=services.prompt, image_service=services.image)


class TestControllerGuards(unittest.TestCase):
    def test_prompt_requires_product_image(self):
        services = RecordingServices()
        controller = make_controller(services)
        controller.upload_image(ImageSlot.STYLE, make_handle())

        self.assertFalse(controller.generate_prompt())
        self.assertEqual(services.prompt_calls, [])
        self.assertIsNone(controller.snapshot().processing.error)

    def test_image_requires_prompt(self):
        services = RecordingServices()
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, make_handle())
        controller.set_prompt("   ")

        self.assertFalse(controller.generate_image())
        self.assertEqual(services.image_calls, [])

    def test_image_requires_product(self):
        services = RecordingServices()
        controller = make_controller(services)
        controller.set_prompt("A scene.")

        self.assertFalse(controller.generate_image())
        self.assertEqual(services.image_calls, [])

    def test_in_flight_prompt_blocks_second_prompt(self):
        controller = None
        nested = []

        def reentrant_prompt(settings, product, style, client=None):
            nested.append((controller.generate_prompt(), controller.snapshot().processing.prompt_in_flight))
            return "Scene."

        controller = StudioController(prompt_service=reentrant_prompt, image_service=RecordingServices().image)
        controller.upload_image(ImageSlot.PRODUCT, make_handle())

        self.assertTrue(controller.generate_prompt())
        self.assertEqual(nested, [(False, True)])
        self.assertEqual(controller.snapshot().prompt, "Scene.")
        self.assertFalse(controller.snapshot().processing.prompt_in_flight)

    def test_generated_slot_cannot_be_uploaded(self):
        controller = make_controller(RecordingServices())
        with self.assertRaises(ValueError):
            controller.upload_image(ImageSlot.GENERATED, make_handle())


class TestControllerTransitions(unittest.TestCase):
    def setUp(self):
        self.product = make_handle((200, 0, 0))
        self.style = make_handle((0, 0, 200))

    def test_prompt_success_stores_text(self):
        services = RecordingServices(prompt_result="Product on a beach.")
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.upload_image(ImageSlot.STYLE, self.style)
        controller.update_settings(lighting="Cinematic")

        self.assertTrue(controller.generate_prompt())

        state = controller.snapshot()
        self.assertEqual(state.prompt, "Product on a beach.")
        self.assertFalse(state.processing.prompt_in_flight)
        settings, product, style = services.prompt_calls[0]
        self.assertEqual(settings.lighting, LightingStyle.CINEMATIC)
        self.assertIs(product, self.product)
        self.assertIs(style, self.style)

    def test_prompt_failure_keeps_previous_prompt(self):
        services = RecordingServices(prompt_error=PromptSynthesisError("boom"))
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.set_prompt("hand written scene")

        self.assertTrue(controller.generate_prompt())

        state = controller.snapshot()
        self.assertEqual(state.processing.error, "Failed to generate prompt. Please try again.")
        self.assertEqual(state.processing.error, PROMPT_FAILURE_MESSAGE)
        self.assertEqual(state.prompt, "hand written scene")
        self.assertFalse(state.processing.prompt_in_flight)

    def test_new_operation_clears_error(self):
        services = RecordingServices(prompt_error=RuntimeError("network down"))
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.generate_prompt()
        self.assertIsNotNone(controller.snapshot().processing.error)

        services.prompt_error = None
        controller.generate_prompt()
        self.assertIsNone(controller.snapshot().processing.error)

    def test_image_failure_keeps_previous_result(self):
        services = RecordingServices()
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.set_prompt("scene")
        controller.generate_image()
        first_result = controller.snapshot().generated

        services.image_error = NoImageDataError()
        self.assertTrue(controller.generate_image())

        state = controller.snapshot()
        self.assertEqual(state.processing.error, IMAGE_FAILURE_MESSAGE)
        self.assertEqual(state.generated, first_result)
        self.assertFalse(state.processing.image_in_flight)

    def test_image_uses_current_settings_and_style(self):
        services = RecordingServices()
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.upload_image(ImageSlot.STYLE, self.style)
        controller.update_settings(aspect_ratio="3:4")
        controller.set_prompt("scene")

        controller.generate_image()

        prompt, product, aspect_ratio, style = services.image_calls[0]
        self.assertEqual(prompt, "scene")
        self.assertEqual(aspect_ratio, AspectRatio.PORTRAIT)
        self.assertIs(style, self.style)

    def test_cleared_style_is_not_sent(self):
        services = RecordingServices()
        controller = make_controller(services)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.upload_image(ImageSlot.STYLE, self.style)
        controller.clear_image(ImageSlot.STYLE)
        controller.set_prompt("scene")

        controller.generate_prompt()
        controller.generate_image()

        self.assertIsNone(services.prompt_calls[0][2])
        self.assertIsNone(services.image_calls[0][3])

    def test_new_shoot_clears_only_result(self):
        controller = make_controller(RecordingServices())
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.set_prompt("scene")
        controller.generate_image()
        self.assertIsNotNone(controller.download())

        controller.new_shoot()

        state = controller.snapshot()
        self.assertIsNone(state.generated)
        self.assertIsNone(controller.download())
        self.assertEqual(state.product, self.product)
        self.assertEqual(state.prompt, "scene")

    def test_snapshot_is_a_copy(self):
        controller = make_controller(RecordingServices())
        snapshot = controller.snapshot()
        snapshot.prompt = "changed outside"
        snapshot.processing.error = "oops"
        state = controller.snapshot()
        self.assertEqual(state.prompt, "")
        self.assertIsNone(state.processing.error)

    def test_revision_increases_on_mutation(self):
        controller = make_controller(RecordingServices())
        before = controller.snapshot().revision
        controller.set_prompt("x")
        self.assertGreater(controller.snapshot().revision, before)

    def test_prompt_and_image_run_concurrently(self):
        prompt_started = threading.Event()
        release_prompt = threading.Event()

        def slow_prompt(settings, product, style, client=None):
            prompt_started.set()
            release_prompt.wait(5)
            return "fresh prompt"

        services = RecordingServices()
        controller = StudioController(prompt_service=slow_prompt, image_service=services.image)
        controller.upload_image(ImageSlot.PRODUCT, self.product)
        controller.set_prompt("old prompt")

        worker = threading.Thread(target=controller.generate_prompt)
        worker.start()
        self.assertTrue(prompt_started.wait(5))

        # The pending prompt request does not block or cancel a render
        self.assertTrue(controller.generate_image())
        self.assertTrue(controller.snapshot().processing.prompt_in_flight)
        release_prompt.set()
        worker.join(5)

        state = controller.snapshot()
        self.assertEqual(services.image_calls[0][0], "old prompt")
        self.assertEqual(state.prompt, "fresh prompt")
        self.assertIsNotNone(state.generated)
        self.assertFalse(state.processing.prompt_in_flight)
        self.assertFalse(state.processing.image_in_flight)


class TestControllerWithGeminiClient(unittest.TestCase):
    def test_no_style_request_for_all_settings(self):
        rendered = make_image_bytes((0, 0, 0))
        for ratio, lighting, perspective in itertools.product(AspectRatio, LightingStyle, CameraPerspective):
            client = FakeClient([text_response("T"), image_response((rendered, 'image/png'))])
            controller = StudioController(client=client)
            controller.upload_image(ImageSlot.PRODUCT, make_handle())
            controller.update_settings(aspect_ratio=ratio, lighting=lighting, perspective=perspective)

            controller.generate_prompt()
            controller.generate_image()

            render_parts = client.calls[1]['contents'][0].parts
            self.assertEqual(len([p for p in render_parts if p.inline_data is not None]), 1)
            self.assertTrue(render_parts[-1].text.startswith("Render this product in a professional studio setting."))
            self.assertEqual(client.calls[1]['config'].image_config.aspect_ratio, ratio.value)

    def test_full_shoot(self):
        rendered = make_image_bytes((0, 90, 0), size=(20, 20))
        client = FakeClient([text_response("Bottle on wet slate."), image_response((rendered, 'image/png'))])
        controller = StudioController(client=client)
        controller.upload_image(ImageSlot.PRODUCT, make_handle())
        controller.update_settings(aspect_ratio="1:1", lighting="Studio Professional", perspective="Eye Level")

        self.assertTrue(controller.generate_prompt())
        self.assertEqual(controller.snapshot().prompt, "Bottle on wet slate.")
        self.assertTrue(controller.generate_image())

        state = controller.snapshot()
        self.assertIsNone(state.processing.error)
        self.assertEqual(state.generated.mime_type, 'image/png')
        self.assertTrue(controller.download().startswith(b'\x89PNG'))
        self.assertIn("SCENE DESCRIPTION: Bottle on wet slate.", client.calls[1]['contents'][0].parts[-1].text)

    def test_no_image_response_sets_error(self):
        client = FakeClient([image_response(text="sorry")])
        controller = StudioController(client=client)
        controller.upload_image(ImageSlot.PRODUCT, make_handle())
        controller.set_prompt("scene")

        controller.generate_image()

        state = controller.snapshot()
        self.assertEqual(state.processing.error, "Generation failed. Ensure your images are clear.")
        self.assertIsNone(state.generated)


class TestControllerRegistry(unittest.TestCase):
    def test_one_controller_per_session(self):
        registry = ControllerRegistry()
        first = registry.get("a")
        self.assertIs(registry.get("a"), first)
        self.assertIsNot(registry.get("b"), first)
        self.assertEqual(len(registry), 2)

    def test_lookup_without_create(self):
        registry = ControllerRegistry()
        self.assertIsNone(registry.get("missing", create=False))
        self.assertEqual(len(registry), 0)

    def test_idle_sessions_expire(self):
        now = [0.0]
        registry = ControllerRegistry(idle_timeout=60, clock=lambda: now[0])
        stale = registry.get("stale")
        now[0] = 30.0
        fresh = registry.get("fresh")

        now[0] = 75.0
        self.assertIs(registry.get("fresh", create=False), fresh)
        self.assertIsNone(registry.get("stale", create=False))
        self.assertEqual(len(registry), 1)
        self.assertIsNot(registry.get("stale"), stale)

    def test_least_recently_used_session_is_dropped(self):
        registry = ControllerRegistry(max_sessions=2)
        first = registry.get("a")
        registry.get("b")
        registry.get("a")
        registry.get("c")

        self.assertEqual(len(registry), 2)
        self.assertIs(registry.get("a", create=False), first)
        self.assertIsNone(registry.get("b", create=False))

    def test_session_ids_are_unique(self):
        self.assertNotEqual(ControllerRegistry.new_session_id(), ControllerRegistry.new_session_id())


if __name__ == "__main__":
    unittest.main()
