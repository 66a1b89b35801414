"""Tests for the Gemini sprite client: response precedence and error wrapping."""

import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from config import settings
from gemini.client import SpriteClient, find_image_part, find_text_part, to_data_uri
from gemini.errors import (
    EmptyResponseError,
    FailureKind,
    ModelRefusedError,
    NoCandidatesError,
    NoImageDataError,
    TransportError,
)
from generator.prompt import build_prompt
from generator.state import GenerationOptions

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


def image_part(data=PNG_BYTES, mime_type="image/png"):
    return SimpleNamespace(
        text=None,
        inline_data=SimpleNamespace(mime_type=mime_type, data=data),
    )


def text_part(text):
    return SimpleNamespace(text=text, inline_data=None)


def response_with(*parts):
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))]
    )


def make_client(response=None, error=None):
    sdk = MagicMock()
    if error is not None:
        sdk.models.generate_content.side_effect = error
    else:
        sdk.models.generate_content.return_value = response
    return SpriteClient(client=sdk), sdk


OPTIONS = GenerationOptions(subject="a grumpy wizard cat", resolution="128x128")


class TestRequest:
    """Tests for the outbound generate_content call."""

    def test_single_call_with_prompt_and_square_ratio(self):
        """One text part with the built prompt and a 1:1 image config."""
        client, sdk = make_client(response_with(image_part()))
        client.generate_sprite(OPTIONS)

        sdk.models.generate_content.assert_called_once()
        kwargs = sdk.models.generate_content.call_args.kwargs
        assert kwargs["model"] == settings.IMAGE_MODEL
        assert len(kwargs["contents"]) == 1
        parts = kwargs["contents"][0].parts
        assert len(parts) == 1
        assert parts[0].text == build_prompt(OPTIONS)
        assert kwargs["config"].image_config.aspect_ratio == "1:1"

    def test_model_override(self):
        """An explicit model name replaces the configured one."""
        client = SpriteClient(client=MagicMock(), model="custom-image-model")
        assert client.build_request("p")["model"] == "custom-image-model"

    def test_missing_api_key(self, monkeypatch):
        """No key and no injected client is a ValueError."""
        monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
        with pytest.raises(ValueError):
            SpriteClient()


class TestResponseHandling:
    """Tests for the response precedence rules."""

    def test_no_candidates(self):
        """An empty candidate list reports the safety filter message."""
        client, _ = make_client(SimpleNamespace(candidates=[]))
        with pytest.raises(NoCandidatesError) as exc:
            client.generate_sprite(OPTIONS)
        assert exc.value.kind is FailureKind.NO_CANDIDATES
        assert "safety filters" in exc.value.message

    def test_candidates_none(self):
        """candidates=None is treated like an empty list."""
        client, _ = make_client(SimpleNamespace(candidates=None))
        with pytest.raises(NoCandidatesError):
            client.generate_sprite(OPTIONS)

    def test_empty_parts(self):
        """A candidate with no parts is an empty response."""
        client, _ = make_client(response_with())
        with pytest.raises(EmptyResponseError):
            client.generate_sprite(OPTIONS)

    def test_missing_content(self):
        """A candidate without content is an empty response."""
        client, _ = make_client(SimpleNamespace(candidates=[SimpleNamespace(content=None)]))
        with pytest.raises(EmptyResponseError):
            client.generate_sprite(OPTIONS)

    def test_inline_image_bytes(self):
        """Raw image bytes are base64-encoded into the data URI."""
        client, _ = make_client(response_with(image_part()))
        uri = client.generate_sprite(OPTIONS)
        assert uri == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")

    def test_inline_image_text_payload_unchanged(self):
        """An already-encoded payload keeps its mime type and data."""
        client, _ = make_client(response_with(image_part(data="iVBORw0KGgo=", mime_type="image/webp")))
        assert client.generate_sprite(OPTIONS) == "data:image/webp;base64,iVBORw0KGgo="

    def test_image_wins_over_text(self):
        """The first image part is used even when text comes first."""
        client, _ = make_client(response_with(
            text_part("Here is your sprite"),
            image_part(data="Zmlyc3Q=", mime_type="image/png"),
            image_part(data="c2Vjb25k", mime_type="image/jpeg"),
        ))
        assert client.generate_sprite(OPTIONS) == "data:image/png;base64,Zmlyc3Q="

    def test_text_only_is_refusal(self):
        """Text without an image surfaces as the model's refusal."""
        client, _ = make_client(response_with(text_part("I cannot draw that.")))
        with pytest.raises(ModelRefusedError) as exc:
            client.generate_sprite(OPTIONS)
        assert exc.value.kind is FailureKind.MODEL_REFUSED
        assert exc.value.message == "I cannot draw that."
        assert exc.value.user_message == "Model response: I cannot draw that."

    def test_first_text_part_reported(self):
        """Only the first text part is shown to the user."""
        client, _ = make_client(response_with(text_part("first"), text_part("second")))
        with pytest.raises(ModelRefusedError) as exc:
            client.generate_sprite(OPTIONS)
        assert exc.value.message == "first"

    def test_parts_without_data(self):
        """Parts with neither text nor image data mean no image."""
        client, _ = make_client(response_with(SimpleNamespace(text=None, inline_data=None)))
        with pytest.raises(NoImageDataError):
            client.generate_sprite(OPTIONS)


class TestTransportFailure:
    """Tests for SDK / network error wrapping."""

    def test_sdk_error_wrapped(self):
        """SDK exceptions become TransportError with the cause chained."""
        client, _ = make_client(error=ConnectionError("connection reset"))
        with pytest.raises(TransportError) as exc:
            client.generate_sprite(OPTIONS)
        assert exc.value.kind is FailureKind.TRANSPORT_FAILURE
        assert exc.value.message == "connection reset"
        assert isinstance(exc.value.__cause__, ConnectionError)

    def test_fallback_message(self):
        """An exception with no message uses the generic failure text."""
        client, _ = make_client(error=RuntimeError())
        with pytest.raises(TransportError) as exc:
            client.generate_sprite(OPTIONS)
        assert exc.value.message == "Failed to generate pixel art."

    def test_no_retry(self):
        """A failed call is not retried."""
        client, sdk = make_client(error=TimeoutError("slow"))
        with pytest.raises(TransportError):
            client.generate_sprite(OPTIONS)
        assert sdk.models.generate_content.call_count == 1


class TestHelpers:
    """Tests for the part search helpers."""

    def test_find_image_part_skips_empty_inline_data(self):
        """Image parts with empty data are skipped."""
        empty = image_part(data=b"")
        real = image_part()
        assert find_image_part([empty, real]) is real

    def test_find_text_part_skips_blank(self):
        """Blank text parts are skipped."""
        blank = text_part("")
        real = text_part("reason")
        assert find_text_part([blank, real]) is real
        assert find_text_part([image_part()]) is None

    def test_to_data_uri_default_mime(self):
        """A missing mime type defaults to image/png."""
        assert to_data_uri(None, "QUJD") == "data:image/png;base64,QUJD"
