"""
Gemini image-generation client.

Wraps a single `generate_content` call through the `google-genai` SDK and
turns the response into a `data:` URI, or raises a typed GenerationError.
The SDK client is passed in (or built once from settings) so tests can
substitute a fake exposing `models.generate_content`.
"""

from __future__ import annotations

import base64
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types

from config import settings
from gemini.errors import (
    EmptyResponseError,
    GenerationError,
    ModelRefusedError,
    NoCandidatesError,
    NoImageDataError,
    TransportError,
)
from generator.prompt import build_prompt
from generator.state import GenerationOptions

DEFAULT_MIME_TYPE = "image/png"


def find_image_part(parts: Sequence[Any]) -> Optional[Any]:
    """Return the first part carrying inline image data, or None."""
    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return part
    return None


def find_text_part(parts: Sequence[Any]) -> Optional[Any]:
    """Return the first part carrying non-empty text, or None."""
    for part in parts:
        if getattr(part, "text", None):
            return part
    return None


def to_data_uri(mime_type: Optional[str], data: bytes | str) -> str:
    """
    Format inline image data as `data:<mime>;base64,<payload>`.

    The Python SDK hands back decoded bytes, which are re-encoded here;
    a payload that is already base64 text is used unchanged.
    """
    if isinstance(data, (bytes, bytearray)):
        payload = base64.b64encode(bytes(data)).decode("ascii")
    else:
        payload = data
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


def extract_image_uri(response: Any) -> str:
    """
    Pull the image out of a generate_content response.

    Precedence: no candidates, no parts, first inline-image part (wins over
    any text), first text part (model refused), nothing usable.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise NoCandidatesError()

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    if not parts:
        raise EmptyResponseError()

    image_part = find_image_part(parts)
    if image_part is not None:
        inline = image_part.inline_data
        return to_data_uri(inline.mime_type, inline.data)

    text_part = find_text_part(parts)
    if text_part is not None:
        raise ModelRefusedError(text_part.text)

    raise NoImageDataError()


class SpriteClient:
    """
    Client for the Gemini image model.

    One call per sprite, square aspect ratio, prompt as the only input.
    No retries: a failed call surfaces immediately.
    """

    def __init__(
        self,
        client: Any = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self.model = model or settings.IMAGE_MODEL
        self.aspect_ratio = settings.ASPECT_RATIO

        if client is None:
            api_key = api_key or settings.GEMINI_API_KEY
            if not api_key:
                raise ValueError(
                    "GEMINI_API_KEY is required. Set it in .env or pass directly."
                )
            client = genai.Client(api_key=api_key)

        self.client = client

    def build_request(self, prompt: str) -> dict[str, Any]:
        """Keyword arguments for `client.models.generate_content`."""
        return {
            "model": self.model,
            "contents": [types.Content(parts=[types.Part(text=prompt)])],
            "config": types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
            ),
        }

    def generate_sprite(self, options: GenerationOptions) -> str:
        """
        Generate a sprite for the given options.

        Returns:
            The image as a `data:<mime>;base64,<payload>` URI.

        Raises:
            GenerationError: one of its typed subclasses; SDK and network
                errors arrive as TransportError.
        """
        prompt = build_prompt(options)
        print(f"[SpriteClient] Requesting {options.resolution.value} sprite from {self.model}...")

        try:
            response = self.client.models.generate_content(**self.build_request(prompt))
        except GenerationError:
            raise
        except Exception as e:
            print(f"[SpriteClient] Gemini generation error: {e!r}")
            raise TransportError(str(e) or None) from e

        try:
            return extract_image_uri(response)
        except GenerationError as e:
            print(f"[SpriteClient] {e.kind.value}: {e.message}")
            raise
