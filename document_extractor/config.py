"""Configuration classes for document extractor."""

import os
from dataclasses import dataclass, field
from typing import Optional

MAX_FILE_SIZE_BYTES = 25 * 1024 * 1024

DEFAULT_VISION_PROMPT = (
    "Extract all visible text from this image. Be thorough and accurate. "
    "Preserve the reading order and line breaks where possible. "
    "Return only the extracted text, without commentary."
)


@dataclass
class VisionConfig:
    """Configuration for the optical (vision model) extraction backend.

    The API key itself is never stored here. It is read from the environment
    variable named by ``api_key_env`` on every request, so rotating the key or
    unsetting it takes effect without rebuilding the extractor.

    Examples:
        >>> # Default configuration (OpenAI, OPENAI_API_KEY)
        >>> config = VisionConfig()

        >>> # OpenAI-compatible server
        >>> config = VisionConfig(model="llava", base_url="http://localhost:8000/v1")
    """

    model: str = "gpt-4o-mini"
    """Multimodal chat model used for optical extraction."""

    api_key_env: str = "OPENAI_API_KEY"
    """Name of the environment variable holding the backend credential."""

    base_url: Optional[str] = None
    """Optional base URL for OpenAI-compatible backends. None uses the SDK default."""

    prompt: str = DEFAULT_VISION_PROMPT
    """Fixed instruction sent alongside every image."""

    max_tokens: int = 4096
    """Upper bound on tokens the model may return for one image."""

    temperature: float = 0.0
    """Sampling temperature. 0 keeps transcription as literal as possible."""

    timeout: Optional[float] = None
    """Request timeout in seconds. None leaves latency to the SDK and the caller."""

    def resolve_api_key(self) -> Optional[str]:
        """Read the backend credential from the environment, or None if unset."""
        key = os.getenv(self.api_key_env, "").strip()
        return key or None


@dataclass
class DocumentConfig:
    """Configuration for structured document parsing."""

    pdf_output: str = "text"
    """PDF rendering mode.

    - "text": plain text layer, page by page (default)
    - "markdown": pymupdf4llm markdown with headers and tables
    """

    fontsize_limit: int = 3
    """Ignore text smaller than this point size in markdown mode."""

    converter_timeout: Optional[float] = 120.0
    """Seconds to wait for textutil/soffice when converting legacy .doc files."""

    def __post_init__(self) -> None:
        if self.pdf_output not in ("text", "markdown"):
            raise ValueError(
                f"pdf_output must be 'text' or 'markdown', got {self.pdf_output!r}"
            )


@dataclass
class ExtractorConfig:
    """Configuration for the extraction dispatcher."""

    max_file_size_bytes: int = MAX_FILE_SIZE_BYTES
    """Hard ceiling on submission size. Default: 25 MiB."""

    strict_credential_check: bool = True
    """Require the vision credential for every request, not just images.

    - True: any request fails with a configuration error when the key is
      missing, even plain text (fail fast, default)
    - False: only image requests need the key
    """

    vision: VisionConfig = field(default_factory=VisionConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """Build configuration from environment variables.

        Reads OPENAI_MODEL, OPENAI_BASE_URL and DOCUMENT_EXTRACTOR_PDF_OUTPUT,
        falling back to defaults for anything unset.
        """
        vision = VisionConfig()
        model = os.getenv("OPENAI_MODEL", "").strip()
        if model:
            vision.model = model
        base_url = os.getenv("OPENAI_BASE_URL", "").strip()
        if base_url:
            vision.base_url = base_url

        pdf_output = os.getenv("DOCUMENT_EXTRACTOR_PDF_OUTPUT", "").strip().lower()
        document = DocumentConfig(pdf_output=pdf_output or "text")

        return cls(vision=vision, document=document)
