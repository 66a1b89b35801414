"""
Palette inspection for normalized sprites.

Counts the flat colors actually present so the preview can show whether
the model respected the requested color limit.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from PIL import Image


@dataclass
class PaletteSummary:
    """Colors found in a sprite versus the requested limit."""
    color_count: int
    max_colors: int
    top_colors: list[str] = field(default_factory=list)  # "#rrggbb", most frequent first

    @property
    def within_limit(self) -> bool:
        return self.color_count <= self.max_colors


def _opaque_pixels(image: Image.Image) -> np.ndarray:
    """(N, 4) uint8 array of the pixels with non-zero alpha."""
    pixels = np.asarray(image.convert("RGBA"), dtype=np.uint8).reshape(-1, 4)
    return pixels[pixels[:, 3] > 0]


def count_colors(image: Image.Image) -> int:
    """Number of distinct RGBA values among visible pixels."""
    pixels = _opaque_pixels(image)
    if pixels.size == 0:
        return 0
    return int(np.unique(pixels, axis=0).shape[0])


def summarize_palette(image: Image.Image, max_colors: int, top: int = 8) -> PaletteSummary:
    pixels = _opaque_pixels(image)
    if pixels.size == 0:
        return PaletteSummary(color_count=0, max_colors=max_colors)

    colors, counts = np.unique(pixels, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")[:top]
    top_colors = [
        f"#{int(r):02x}{int(g):02x}{int(b):02x}" for r, g, b, _ in colors[order]
    ]
    return PaletteSummary(
        color_count=int(colors.shape[0]),
        max_colors=max_colors,
        top_colors=top_colors,
    )
