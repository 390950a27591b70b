"""Response envelope construction."""

from datetime import datetime, timezone
from typing import Optional

from document_extractor.exceptions import DocumentExtractorError
from document_extractor.models import (
    ExtractionMetadata,
    ExtractionResponse,
    ExtractionResult,
    FileSubmission,
)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO 8601 timestamp in UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def build_metadata(submission: Optional[FileSubmission]) -> ExtractionMetadata:
    """Best-effort metadata; empty strings when the submission is missing."""
    if submission is None:
        return ExtractionMetadata(file_name="", file_type="", extracted_at=utc_timestamp())
    return ExtractionMetadata(
        file_name=submission.file_name or "",
        file_type=submission.content_type or "",
        extracted_at=utc_timestamp(),
    )


def success_response(
    submission: FileSubmission, result: ExtractionResult
) -> ExtractionResponse:
    return ExtractionResponse(
        text=result.text or "",
        metadata=build_metadata(submission),
        success=True,
        status_code=200,
    )


def error_response(
    submission: Optional[FileSubmission], error: DocumentExtractorError
) -> ExtractionResponse:
    return ExtractionResponse(
        text="",
        metadata=build_metadata(submission),
        success=False,
        error=error.message,
        status_code=error.status_code,
    )
