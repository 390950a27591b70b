"""High-level API for document extraction."""

import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from document_extractor.config import MAX_FILE_SIZE_BYTES, ExtractorConfig
from document_extractor.exceptions import DocumentExtractorError
from document_extractor.handler import ExtractionDispatcher
from document_extractor.models import ExtractionResponse, FileSubmission

UPLOAD_FIELD = "file"


def submission_from_upload(
    form: Mapping[str, Any],
    field_name: str = UPLOAD_FIELD,
    max_bytes: int = MAX_FILE_SIZE_BYTES,
) -> Optional[FileSubmission]:
    """Build a submission from a multipart form's ``file`` field.

    Works with any upload object exposing ``filename``, ``content_type`` and
    either ``read(size)`` or a ``file`` attribute, such as Werkzeug's
    FileStorage or Starlette's UploadFile. Returns None when the field is
    absent so the dispatcher can report "No file provided".

    At most ``max_bytes + 1`` bytes are read: enough for the dispatcher to
    reject an oversize upload without buffering all of it.
    """
    upload = form.get(field_name)
    if upload is None:
        return None

    stream = getattr(upload, "file", None)
    if stream is None or not hasattr(stream, "read"):
        stream = upload
    content = stream.read(max_bytes + 1)
    if isinstance(content, str):
        content = content.encode("utf-8")

    return FileSubmission(
        content=content,
        file_name=getattr(upload, "filename", None) or "",
        content_type=getattr(upload, "content_type", None) or "",
    )


def extract_document(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
    raise_on_error: bool = False,
) -> ExtractionResponse:
    """Extract text from a document given as a path or raw bytes.

    Args:
        file_path: Path to document file (alternative to file_bytes)
        file_bytes: Raw document bytes (alternative to file_path)
        file_name: Original filename. Defaults to the path's name.
        mime_type: Declared content type. Guessed from the file name if omitted.
        config: Extractor configuration (optional, uses environment defaults)
        raise_on_error: Raise DocumentExtractorError instead of returning a
            failed envelope

    Returns:
        ExtractionResponse with extracted text and metadata

    Raises:
        ValueError: If both or neither of file_path and file_bytes are given,
            or the path does not exist
        DocumentExtractorError: On extraction failure, only if raise_on_error

    Examples:
        >>> response = extract_document(file_path="report.pdf")
        >>> print(response.text)

        >>> response = extract_document(
        ...     file_bytes=b"hello", file_name="note.txt", mime_type="text/plain"
        ... )
    """
    if file_path and file_bytes is not None:
        raise ValueError("Provide either file_path or file_bytes, not both")
    if not file_path and file_bytes is None:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.is_file():
            raise ValueError(f"File not found: {file_path}")
        file_bytes = path.read_bytes()
        file_name = file_name or path.name

    if not mime_type and file_name:
        mime_type, _ = mimetypes.guess_type(file_name)

    submission = FileSubmission(
        content=file_bytes,
        file_name=file_name or "",
        content_type=mime_type or "",
    )
    dispatcher = ExtractionDispatcher(config=config or ExtractorConfig.from_env())
    response = dispatcher.extract(submission)

    if raise_on_error and not response.success:
        raise DocumentExtractorError(response.error, status_code=response.status_code)
    return response
