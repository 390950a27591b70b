"""Optical text extraction through a multimodal chat model."""

import base64
import io
import warnings
from typing import Any, Callable, Optional

from openai import OpenAI
from PIL import Image, UnidentifiedImageError

from document_extractor.classifier import FileCategory, FileFamily
from document_extractor.config import VisionConfig
from document_extractor.exceptions import MissingConfigurationError
from document_extractor.logger import Timer, get_logger

logger = get_logger(__name__)

ClientFactory = Callable[[VisionConfig, str], Any]


def default_client_factory(config: VisionConfig, api_key: str) -> OpenAI:
    """Build an OpenAI client for one request. Retries are disabled."""
    kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
    if config.base_url:
        kwargs["base_url"] = config.base_url
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    return OpenAI(**kwargs)


class OpticalTextExtractor:
    """Recover text from PNG, JPEG and WebP images with a vision model.

    The image is validated locally with Pillow, sent as a base64 data URL
    together with a fixed transcription prompt, and the model's text reply is
    returned as-is. Backend errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        config: Optional[VisionConfig] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.config = config or VisionConfig()
        self.client_factory = client_factory or default_client_factory

    def extract(self, file_bytes: bytes, category: FileCategory) -> str:
        if category.family is not FileFamily.IMAGE:
            raise ValueError(f"Not an image: {category.kind.value}")

        api_key = self.config.resolve_api_key()
        if api_key is None:
            raise MissingConfigurationError(
                f"Service not configured: {self.config.api_key_env} is not set"
            )

        mime_type = f"image/{category.kind.value}"
        self._inspect_image(file_bytes, mime_type)

        encoded = base64.b64encode(file_bytes).decode("ascii")
        client = self.client_factory(self.config, api_key)

        with Timer("vision_request") as timer:
            response = client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": self.config.prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                            },
                        ],
                    }
                ],
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )

        text = self._response_text(response)

        logger.info(
            "Vision model returned text",
            extra_data={
                "model": self.config.model,
                "mime_type": mime_type,
                "characters_extracted": len(text),
                "request_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    @staticmethod
    def _inspect_image(file_bytes: bytes, mime_type: str) -> None:
        """Log image format and dimensions. Only undecodable data is rejected."""
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", Image.DecompressionBombWarning)
                image = Image.open(io.BytesIO(file_bytes))
        except Image.DecompressionBombError as exc:
            # Large pixel counts are the backend's concern, not ours
            logger.warning(
                "Skipping local inspection of very large image",
                extra_data={
                    "declared_mime_type": mime_type,
                    "size_bytes": len(file_bytes),
                    "error": str(exc),
                },
            )
            return
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Unreadable image data") from exc

        with image:
            logger.debug(
                "Submitting image to vision model",
                extra_data={
                    "declared_mime_type": mime_type,
                    "image_format": image.format,
                    "image_dimensions": f"{image.size[0]}x{image.size[1]}",
                    "size_bytes": len(file_bytes),
                },
            )

    @staticmethod
    def _response_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ValueError("No text content returned")

        message = choices[0].message
        content = getattr(message, "content", None)
        if getattr(message, "refusal", None) or not isinstance(content, str):
            raise ValueError("No text content returned")
        return content
