"""Tests for the optical text extractor."""

import base64
from io import BytesIO
from unittest.mock import MagicMock

import pytest
from PIL import Image

from document_extractor.classifier import JPEG, PDF, PNG
from document_extractor.config import DEFAULT_VISION_PROMPT, VisionConfig
from document_extractor.exceptions import MissingConfigurationError
from document_extractor.vision import OpticalTextExtractor, default_client_factory


@pytest.fixture
def extractor(client_factory):
    return OpticalTextExtractor(VisionConfig(model="test-vision"), client_factory=client_factory)


def test_returns_model_text(extractor, png_image):
    assert extractor.extract(png_image, PNG) == "Invoice #42\nTotal: 10 EUR"


def test_sends_prompt_and_data_url(extractor, vision_client, png_image):
    extractor.extract(png_image, PNG)

    kwargs = vision_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-vision"
    content = kwargs["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": DEFAULT_VISION_PROMPT}
    url = content[1]["image_url"]["url"]
    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == png_image


def test_client_built_with_env_key(extractor, client_factory, png_image, api_key):
    extractor.extract(png_image, PNG)

    config, key = client_factory.call_args.args
    assert key == api_key
    assert config.model == "test-vision"


def test_jpeg_sent_with_jpeg_mime(extractor, vision_client):
    buffer = BytesIO()
    Image.new("RGB", (8, 8)).save(buffer, format="JPEG")

    extractor.extract(buffer.getvalue(), JPEG)

    url = vision_client.chat.completions.create.call_args.kwargs["messages"][0]["content"][1][
        "image_url"
    ]["url"]
    assert url.startswith("data:image/jpeg;base64,")


def test_empty_text_is_not_an_error(extractor, vision_client, png_image, make_chat_response):
    vision_client.chat.completions.create.return_value = make_chat_response("")

    assert extractor.extract(png_image, PNG) == ""


@pytest.mark.parametrize(
    "content,refusal",
    [
        (None, None),
        (None, "I can't help with that."),
        ([{"type": "image"}], None),
    ],
)
def test_non_text_content_fails(
    extractor, vision_client, png_image, make_chat_response, content, refusal
):
    vision_client.chat.completions.create.return_value = make_chat_response(content, refusal)

    with pytest.raises(ValueError) as exc_info:
        extractor.extract(png_image, PNG)

    assert str(exc_info.value) == "No text content returned"


def test_backend_errors_propagate(extractor, vision_client, png_image):
    vision_client.chat.completions.create.side_effect = RuntimeError("Error code: 429")

    with pytest.raises(RuntimeError):
        extractor.extract(png_image, PNG)


def test_invalid_image_fails_before_backend_call(extractor, vision_client):
    with pytest.raises(ValueError) as exc_info:
        extractor.extract(b"not an image", PNG)

    assert str(exc_info.value) == "Unreadable image data"
    vision_client.chat.completions.create.assert_not_called()


@pytest.fixture(scope="module")
def huge_png():
    """Bilevel PNG above the decompression bomb threshold, small on disk."""
    buffer = BytesIO()
    Image.new("1", (15000, 12000)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_large_pixel_count_still_reaches_backend(extractor, vision_client, huge_png):
    text = extractor.extract(huge_png, PNG)

    assert text == "Invoice #42\nTotal: 10 EUR"
    assert vision_client.chat.completions.create.call_count == 1


def test_missing_key_raises(extractor, png_image, no_api_key, client_factory):
    with pytest.raises(MissingConfigurationError):
        extractor.extract(png_image, PNG)

    client_factory.assert_not_called()


def test_rejects_non_image_category(extractor, simple_pdf):
    with pytest.raises(ValueError):
        extractor.extract(simple_pdf, PDF)


def test_default_client_factory_disables_retries():
    client = default_client_factory(
        VisionConfig(base_url="http://localhost:8000/v1", timeout=5.0), "sk-test"
    )

    assert client.api_key == "sk-test"
    assert client.max_retries == 0
    assert str(client.base_url).startswith("http://localhost:8000/v1")


def test_default_factory_is_used(png_image, monkeypatch):
    factory = MagicMock()
    monkeypatch.setattr("document_extractor.vision.default_client_factory", factory)

    assert OpticalTextExtractor().client_factory is factory
