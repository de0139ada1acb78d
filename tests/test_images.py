import base64
import io
import unittest

from PIL import Image

from bananastudio.images import ImageHandle
from tests.helpers import make_image_bytes


class TestImageHandle(unittest.TestCase):
    def test_from_data_url_uses_embedded_mime_type(self):
        data = make_image_bytes(fmt='JPEG')
        url = "data:image/jpeg;base64," + base64.b64encode(data).decode('ascii')
        handle = ImageHandle.from_base64(url)
        self.assertEqual(handle.mime_type, 'image/jpeg')
        self.assertEqual(handle.data, data)

    def test_from_raw_base64(self):
        data = make_image_bytes()
        handle = ImageHandle.from_base64(base64.b64encode(data).decode('ascii'), mime_type='image/webp')
        self.assertEqual(handle.mime_type, 'image/webp')
        self.assertEqual(handle.data, data)

    def test_invalid_base64_raises(self):
        with self.assertRaises(ValueError):
            ImageHandle.from_base64("not base64!!")

    def test_to_png_reencodes(self):
        handle = ImageHandle(data=make_image_bytes(fmt='JPEG'), mime_type='image/jpeg')
        png = handle.to_png()
        self.assertEqual(png.mime_type, 'image/png')
        with Image.open(io.BytesIO(png.data)) as img:
            self.assertEqual(img.format, 'PNG')

    def test_describe(self):
        info = ImageHandle(data=make_image_bytes(size=(12, 6))).describe()
        self.assertEqual((info['width'], info['height']), (12, 6))
        self.assertEqual(info['format'], 'PNG')
        self.assertEqual(ImageHandle(data=b'garbage').describe(), {})


if __name__ == "__main__":
    unittest.main()
