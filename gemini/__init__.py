"""Gemini Client: one-shot sprite generation and its failure taxonomy."""

from gemini.client import SpriteClient, extract_image_uri
from gemini.errors import (
    EmptyResponseError,
    FailureKind,
    GenerationError,
    ModelRefusedError,
    NoCandidatesError,
    NoImageDataError,
    TransportError,
)

__all__ = [
    "SpriteClient",
    "extract_image_uri",
    "EmptyResponseError",
    "FailureKind",
    "GenerationError",
    "ModelRefusedError",
    "NoCandidatesError",
    "NoImageDataError",
    "TransportError",
]
