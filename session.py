"""
Sprite session: the per-user generate / clear state machine.

Owns the single in-flight result, the last submitted options and the
preview canvas. Only the most recent request is ever drawn; an error
always discards the previous image.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, Callable, Mapping, MutableMapping, Optional

from canvas.normalizer import ImageDecodeError, PixelCanvas
from config import settings
from gemini.client import SpriteClient
from gemini.errors import FailureKind, GenerationError
from generator.state import (
    BackgroundType,
    BandOrientation,
    GenerationOptions,
    GenerationResult,
)


@dataclass
class GenerationState:
    """What the dashboard renders: spinner, error banner, preview."""
    is_loading: bool = False
    error: Optional[str] = None
    image_data: Optional[str] = None  # base64 data URI


class SpriteSession:
    """
    Controller connecting the form, the Gemini client and the canvas.

    Can be used programmatically or driven by the Streamlit UI.
    """

    def __init__(self, client: SpriteClient, canvas: Optional[PixelCanvas] = None):
        self.client = client
        self.canvas = canvas or PixelCanvas()
        self.state = GenerationState()
        self.last_options: Optional[GenerationOptions] = None
        self._request_id = 0

    def generate(self, options: GenerationOptions) -> GenerationResult:
        """
        Run one generation request and update state.

        Raises:
            RuntimeError: a request is already in flight.
        """
        if self.state.is_loading:
            raise RuntimeError("A sprite generation request is already in progress.")

        self._request_id += 1
        request_id = self._request_id

        self.state = GenerationState(is_loading=True)
        self.last_options = options
        self.canvas.clear()

        try:
            try:
                image_data = self.client.generate_sprite(options)
            except GenerationError as e:
                result = GenerationResult.failure(e.user_message, e.kind.value)
            else:
                result = GenerationResult.success(image_data)

            return self._complete(request_id, result)
        finally:
            self.state.is_loading = False

    def _complete(self, request_id: int, result: GenerationResult) -> GenerationResult:
        """Apply a finished result unless a newer request or a clear superseded it."""
        if request_id != self._request_id:
            return result

        if result.ok:
            try:
                self.canvas.draw(result.image_data)
            except ImageDecodeError as e:
                self.canvas.clear()
                result = GenerationResult.failure(str(e), FailureKind.NO_IMAGE_DATA.value)

        if result.ok:
            self.state = GenerationState(image_data=result.image_data)
        else:
            self.state = GenerationState(error=result.error)
        return result

    def clear(self) -> None:
        """Discard the current image and error; back to the placeholder view."""
        self._request_id += 1
        self.state = GenerationState()
        self.last_options = None
        self.canvas.clear()

    def style_rules(self) -> list[str]:
        """The "Style Rules Applied" summary for the last submitted options."""
        opts = self.last_options
        resolution = opts.resolution.value if opts else settings.DEFAULT_RESOLUTION
        max_colors = opts.max_colors if opts else settings.DEFAULT_MAX_COLORS
        background = "Striped" if opts and opts.is_banded else "Solid"
        return [
            f"Resolution: {resolution} Strict",
            f"Palette: Max {max_colors} Flat Colors",
            f"Background: {background}",
            "No Shading, No Gradients",
        ]


# ── UI request queue ─────────────────────────────────────────────────
# Works on any mutable mapping; the dashboard passes st.session_state.

GENERIC_FAILURE = "Failed to generate sprite. Please try again."


def options_from_form(form: Mapping[str, Any]) -> GenerationOptions:
    """Build options from widget values; band settings only apply when banded."""
    banded = form.get("background_type") == BackgroundType.BANDS
    values = {
        "subject": form.get("subject", ""),
        "resolution": form.get("resolution", settings.DEFAULT_RESOLUTION),
        "max_colors": form.get("max_colors", settings.DEFAULT_MAX_COLORS),
        "background_type": form.get("background_type", BackgroundType.SOLID),
        "include_props": form.get("include_props", False),
    }
    if banded:
        values["band_orientation"] = form.get("band_orientation", BandOrientation.HORIZONTAL)
        values["band_count"] = form.get("band_count", settings.DEFAULT_BAND_COUNT)
    return GenerationOptions.from_dict(values)


def queue_request(ui_state: MutableMapping[str, Any]) -> bool:
    """
    Generate-button callback. Returns True if a request was queued.

    A click while ui_state["generating"] is set is dropped.
    """
    if ui_state.get("generating"):
        return False

    try:
        options = options_from_form(ui_state)
    except ValueError as e:
        ui_state["error_message"] = str(e)
        return False

    ui_state["pending_options"] = options
    ui_state["generating"] = True
    return True


def run_pending(
    ui_state: MutableMapping[str, Any],
    get_session: Callable[[], SpriteSession],
) -> Optional[GenerationResult]:
    """Run the queued request, if any. The generating flag is always reset."""
    options = ui_state.get("pending_options")
    if not ui_state.get("generating") or options is None:
        return None

    try:
        return get_session().generate(options)
    except Exception as e:
        print(f"[SpriteSession] Generation failed: {e}")
        traceback.print_exc()
        ui_state["error_message"] = str(e) or GENERIC_FAILURE
        return None
    finally:
        ui_state["generating"] = False
        ui_state["pending_options"] = None
