"""
Prompt builder — GenerationOptions → Gemini text prompt.

Renders the pixel-sprite Jinja2 template with the scalar options and the
derived background / props instructions. Pure: no I/O beyond the first
template load, deterministic for fixed options.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from generator.state import GenerationOptions

# Jinja2 environment pointing at our templates directory
_TEMPLATE_DIR = Path(__file__).parent / "templates"
_jinja_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)

TEMPLATE_NAME = "pixel_sprite.j2"

SOLID_BACKGROUND = (
    "Single solid flat color. "
    "Ensure high contrast with the character to define edges without outlines."
)

BANDED_BACKGROUND = "{count} {orientation} flat color bands. Clean, hard edges. No gradients."

BACKGROUND_PROPS = (
    "\n"
    "- Add 1-2 simple thematic props in the background.\n"
    "- Props must be borderless and flat.\n"
    "- Props must be smaller than the main character."
)

NO_PROPS = "No objects in background."


def background_instruction(options: GenerationOptions) -> str:
    if options.is_banded:
        return BANDED_BACKGROUND.format(
            count=options.band_count,
            orientation=options.band_orientation.value,
        )
    return SOLID_BACKGROUND


def props_instruction(options: GenerationOptions) -> str:
    return BACKGROUND_PROPS if options.include_props else NO_PROPS


def build_prompt(options: GenerationOptions) -> str:
    """
    Build the final text prompt for a sprite request.

    The subject is inserted verbatim. Jinja2 never re-parses rendered
    values, so template syntax inside the subject is left as-is.
    """
    template = _jinja_env.get_template(TEMPLATE_NAME)
    return template.render(
        resolution=options.resolution.value,
        max_colors=str(options.max_colors),
        subject=options.subject,
        background_instruction=background_instruction(options),
        props_instruction=props_instruction(options),
    )
