"""
Typed failures of a sprite generation request.

Every failure is terminal for the request; nothing here is retried.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

FALLBACK_MESSAGE = "Failed to generate pixel art."


class FailureKind(str, Enum):
    NO_CANDIDATES = "NoCandidates"
    EMPTY_RESPONSE = "EmptyResponse"
    MODEL_REFUSED = "ModelRefused"
    NO_IMAGE_DATA = "NoImageData"
    TRANSPORT_FAILURE = "TransportFailure"


class GenerationError(Exception):
    """Base class for every sprite generation failure."""

    kind: FailureKind = FailureKind.TRANSPORT_FAILURE
    default_message: str = FALLBACK_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Text shown in the error banner."""
        return self.message


class NoCandidatesError(GenerationError):
    kind = FailureKind.NO_CANDIDATES
    default_message = (
        "The model failed to generate content (No candidates returned). "
        "It might have been blocked by safety filters."
    )


class EmptyResponseError(GenerationError):
    kind = FailureKind.EMPTY_RESPONSE
    default_message = "The model returned an empty response."


class ModelRefusedError(GenerationError):
    """The model answered with text (usually an explanation) instead of an image."""

    kind = FailureKind.MODEL_REFUSED

    def __init__(self, text: str):
        super().__init__(text)
        self.text = text

    @property
    def user_message(self) -> str:
        return f"Model response: {self.text}"


class NoImageDataError(GenerationError):
    kind = FailureKind.NO_IMAGE_DATA
    default_message = "No image data found in generation response."


class TransportError(GenerationError):
    kind = FailureKind.TRANSPORT_FAILURE
