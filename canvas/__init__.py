"""Canvas: 256×256 nearest-neighbor normalization, PNG export, palette stats."""

from canvas.normalizer import ImageDecodeError, PixelCanvas, decode_image, normalize
from canvas.palette import PaletteSummary, count_colors, summarize_palette

__all__ = [
    "ImageDecodeError",
    "PixelCanvas",
    "decode_image",
    "normalize",
    "PaletteSummary",
    "count_colors",
    "summarize_palette",
]
