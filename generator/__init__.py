"""Sprite Generator — options, Jinja2 prompt template, results."""

from generator.state import (
    BackgroundType,
    BandOrientation,
    GenerationOptions,
    GenerationResult,
    Resolution,
)
from generator.prompt import build_prompt

__all__ = [
    "BackgroundType",
    "BandOrientation",
    "GenerationOptions",
    "GenerationResult",
    "Resolution",
    "build_prompt",
]
