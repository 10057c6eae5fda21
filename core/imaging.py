# Path: core/imaging.py
# Purpose: Decode and encode image payloads exchanged with the catalog, provider, and API.
# Layer: core.
# Details: Accepts raw bytes or base64 data URIs and hands Pillow images to fingerprinting and providers.

from __future__ import annotations

import base64
import binascii
import io
from typing import Union

from PIL import Image, UnidentifiedImageError

from core.errors import InvalidImageError
from core.models.domain import ImageDimensions

ImagePayload = Union[bytes, str]


def to_bytes(payload: ImagePayload) -> bytes:
    """Return raw image bytes from bytes, base64 text, or a ``data:image/...;base64,`` URI."""

    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    text = payload.strip()
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError("Image payload is not valid base64.") from exc


def open_image(payload: ImagePayload) -> Image.Image:
    """Decode a payload into a fully loaded Pillow image."""

    data = to_bytes(payload)
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise InvalidImageError("Image payload could not be decoded.") from exc


def dimensions_of(image: Image.Image) -> ImageDimensions:
    return ImageDimensions(width=image.width, height=image.height)


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
