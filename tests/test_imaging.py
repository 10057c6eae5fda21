import base64

import pytest
from PIL import Image

from core.errors import InvalidImageError
from core.imaging import open_image, to_bytes, to_data_uri


def test_data_uri_and_base64_decode_to_same_bytes(gradient_png):
    encoded = base64.b64encode(gradient_png).decode("ascii")
    assert to_bytes(encoded) == gradient_png
    assert to_bytes(to_data_uri(gradient_png)) == gradient_png


def test_open_image_reads_size(gradient_png):
    assert open_image(gradient_png).size == (64, 64)


def test_garbage_is_invalid_image():
    with pytest.raises(InvalidImageError):
        open_image(b"not an image")


def test_oversized_image_is_invalid_image(monkeypatch, gradient_png):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(InvalidImageError):
        open_image(gradient_png)
