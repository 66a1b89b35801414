"""
Canvas normalizer — data URI → strict 256×256 pixel sprite.

Decodes the image returned by the model, redraws it at the fixed canvas
size with nearest-neighbor sampling (no smoothing), and exports PNG bytes.
The canvas size never follows the requested prompt resolution.
"""

from __future__ import annotations

import base64
import binascii
import io
import re
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from config import settings

_DATA_URI = re.compile(r"^data:(?P<mime>[^;,]+);base64,(?P<payload>.*)$", re.DOTALL)


class ImageDecodeError(ValueError):
    """The data URI or the image bytes inside it could not be decoded."""


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a `data:<mime>;base64,<payload>` URI into (mime, raw bytes)."""
    match = _DATA_URI.match(uri or "")
    if match is None:
        raise ImageDecodeError("Not a base64 data URI.")
    try:
        raw = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e
    return match.group("mime"), raw


def decode_image(uri: str) -> Image.Image:
    """Decode a data URI into a fully loaded PIL Image."""
    _, raw = decode_data_uri(uri)
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageDecodeError(f"Could not decode image data: {e}") from e
    return img


def normalize(image: Image.Image, size: Optional[int] = None) -> Image.Image:
    """Redraw onto a size×size RGBA surface, nearest-neighbor only."""
    size = size or settings.CANVAS_SIZE
    return image.convert("RGBA").resize((size, size), Image.Resampling.NEAREST)


class PixelCanvas:
    """
    The preview/export surface.

    Holds at most one image; drawing a new one or clearing discards the
    previous reference, so a superseded image is never exported.
    """

    def __init__(self, size: Optional[int] = None):
        self.size = size or settings.CANVAS_SIZE
        self.image: Optional[Image.Image] = None

    @property
    def filename(self) -> str:
        return settings.EXPORT_FILENAME

    @property
    def has_image(self) -> bool:
        return self.image is not None

    def draw(self, uri: str) -> Image.Image:
        """Decode and draw; the canvas is left untouched if decoding fails."""
        self.image = normalize(decode_image(uri), self.size)
        return self.image

    def clear(self) -> None:
        self.image = None

    def export_png(self) -> Optional[bytes]:
        """PNG bytes of the current surface, or None when nothing is drawn."""
        if self.image is None:
            return None
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()

    def export_to_file(self, directory: str | Path | None = None) -> Optional[Path]:
        """Write the PNG to directory/pixel-sprite-256.png. Returns the path."""
        data = self.export_png()
        if data is None:
            return None
        path = Path(directory or settings.OUTPUTS_DIR) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
