"""
Generation options and results.

GenerationOptions is the immutable value object the form builds before a
request; GenerationResult is the single outcome of that request.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional

from config import settings

MIN_COLORS = 2
MAX_COLORS = 16
MIN_BANDS = 2
MAX_BANDS = 5


class Resolution(str, Enum):
    MACRO = "64x64"
    RETRO = "128x128"
    SHARP = "256x256"

    def __str__(self) -> str:
        return self.value


class BackgroundType(str, Enum):
    SOLID = "solid"
    BANDS = "bands"

    def __str__(self) -> str:
        return self.value


class BandOrientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def __str__(self) -> str:
        return self.value


def _check_range(name: str, value: Any, lo: int, hi: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not lo <= value <= hi:
        raise ValueError(f"{name} must be between {lo} and {hi}, got {value}")


@dataclass(frozen=True)
class GenerationOptions:
    """
    Parameters collected by the sprite form.

    Band settings are only meaningful when background_type is BANDS, but
    they are always validated so a toggle back to bands never carries an
    out-of-range value.
    """
    subject: str
    resolution: Resolution = Resolution(settings.DEFAULT_RESOLUTION)
    max_colors: int = settings.DEFAULT_MAX_COLORS
    background_type: BackgroundType = BackgroundType.SOLID
    band_orientation: BandOrientation = BandOrientation.HORIZONTAL
    band_count: int = settings.DEFAULT_BAND_COUNT
    include_props: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.subject, str) or not self.subject.strip():
            raise ValueError("subject must be a non-empty string")

        # Accept plain strings from form widgets / CLI flags
        object.__setattr__(self, "resolution", Resolution(self.resolution))
        object.__setattr__(self, "background_type", BackgroundType(self.background_type))
        object.__setattr__(self, "band_orientation", BandOrientation(self.band_orientation))

        _check_range("max_colors", self.max_colors, MIN_COLORS, MAX_COLORS)
        _check_range("band_count", self.band_count, MIN_BANDS, MAX_BANDS)

        if not isinstance(self.include_props, bool):
            raise ValueError(f"include_props must be a bool, got {self.include_props!r}")

    @property
    def is_banded(self) -> bool:
        return self.background_type is BackgroundType.BANDS

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "resolution": self.resolution.value,
            "max_colors": self.max_colors,
            "background_type": self.background_type.value,
            "band_orientation": self.band_orientation.value,
            "band_count": self.band_count,
            "include_props": self.include_props,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GenerationOptions:
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in names})


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one request: a data URI or a failure message, never both."""
    image_data: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[str] = None  # failure kind, see gemini.errors.FailureKind

    @property
    def ok(self) -> bool:
        return self.image_data is not None

    @classmethod
    def success(cls, image_data: str) -> GenerationResult:
        return cls(image_data=image_data)

    @classmethod
    def failure(cls, message: str, kind: Optional[str] = None) -> GenerationResult:
        return cls(error=message, kind=kind)
