import argparse
import sys
import traceback

from canvas.normalizer import PixelCanvas
from canvas.palette import summarize_palette
from config import settings
from gemini.client import SpriteClient
from gemini.errors import GenerationError
from generator.prompt import build_prompt
from generator.state import BackgroundType, GenerationOptions, Resolution


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate one pixel sprite headlessly.")
    parser.add_argument("subject", help='e.g. "a grumpy wizard cat"')
    parser.add_argument("--resolution", default=settings.DEFAULT_RESOLUTION,
                        choices=[r.value for r in Resolution])
    parser.add_argument("--max-colors", type=int, default=settings.DEFAULT_MAX_COLORS)
    parser.add_argument("--bands", choices=["horizontal", "vertical"], default=None,
                        help="use a banded background with this orientation")
    parser.add_argument("--band-count", type=int, default=settings.DEFAULT_BAND_COUNT)
    parser.add_argument("--props", action="store_true", help="include thematic props")
    parser.add_argument("--out", default=None, help="output directory (default: outputs/)")
    parser.add_argument("--show-prompt", action="store_true")
    return parser.parse_args(argv)


def debug_generate(argv=None) -> int:
    args = parse_args(argv)

    options = GenerationOptions(
        subject=args.subject,
        resolution=args.resolution,
        max_colors=args.max_colors,
        background_type=BackgroundType.BANDS if args.bands else BackgroundType.SOLID,
        band_orientation=args.bands or "horizontal",
        band_count=args.band_count,
        include_props=args.props,
    )

    if args.show_prompt:
        print("DEBUG: Prompt:")
        print(build_prompt(options))

    try:
        client = SpriteClient()
        print(f"DEBUG: Calling {client.model}...")
        image_data = client.generate_sprite(options)
        canvas = PixelCanvas()
        canvas.draw(image_data)
    except GenerationError as e:
        print(f"DEBUG: {e.kind.value}: {e.user_message}")
        return 1
    except Exception:
        print("\n=== TRACEBACK START ===")
        traceback.print_exc()
        print("=== TRACEBACK END ===\n")
        return 1

    path = canvas.export_to_file(args.out)

    summary = summarize_palette(canvas.image, options.max_colors)
    print(f"DEBUG: Palette: {summary.color_count} colors (limit {summary.max_colors})")
    print(f"DEBUG: Saved {canvas.size}x{canvas.size} sprite to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(debug_generate())
