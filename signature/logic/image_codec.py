# signature/logic/image_codec.py
from __future__ import annotations

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from ..exceptions.errors import RenderError

PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def png_to_data_url(png_bytes: bytes) -> str:
    return PNG_DATA_URL_PREFIX + base64.b64encode(png_bytes).decode("ascii")


def data_url_to_bytes(data_url: str) -> bytes:
    """Accepts ``data:<mime>;base64,<payload>`` or a bare base64 payload."""
    payload = data_url.split(",", 1)[1] if data_url.startswith("data:") else data_url
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RenderError(f"Signature image is not valid base64: {exc}") from exc


def decode_image(data_url: str) -> Image.Image:
    """Fully decode a signature image into an RGBA Pillow image."""
    raw = data_url_to_bytes(data_url)
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise RenderError(f"Signature image could not be decoded: {exc}") from exc
    return img.convert("RGBA")


def image_to_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
