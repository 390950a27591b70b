"""Data models for document extractor."""

import json
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class FileSubmission:
    """One uploaded file, as declared by the caller."""

    content: bytes
    file_name: str = ""
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of a single strategy call: either text or an error reason."""

    text: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.error is None):
            raise ValueError("ExtractionResult needs exactly one of text or error")

    @classmethod
    def ok(cls, text: str) -> "ExtractionResult":
        return cls(text=text)

    @classmethod
    def err(cls, reason: str) -> "ExtractionResult":
        return cls(error=reason)

    @property
    def is_ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ExtractionMetadata:
    file_name: str
    file_type: str
    extracted_at: str  # ISO 8601, UTC


@dataclass(frozen=True)
class ExtractionResponse:
    """Envelope returned for every extraction call, success or failure."""

    text: str
    metadata: ExtractionMetadata
    success: bool
    error: Optional[str] = None
    status_code: int = field(default=200, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Render the wire shape (camelCase keys, error omitted on success)."""
        payload: dict[str, Any] = {
            "text": self.text,
            "metadata": {
                "fileName": self.metadata.file_name,
                "fileType": self.metadata.file_type,
                "extractedAt": self.metadata.extracted_at,
            },
            "success": self.success,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, **kwargs)
