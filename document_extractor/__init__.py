"""Document text extraction with format-specific strategies."""

from document_extractor.classifier import (
    SUPPORTED_CONTENT_TYPES,
    FileCategory,
    FileFamily,
    FileKind,
    classify,
    is_supported,
)
from document_extractor.config import (
    MAX_FILE_SIZE_BYTES,
    DocumentConfig,
    ExtractorConfig,
    VisionConfig,
)
from document_extractor.exceptions import (
    DocumentExtractorError,
    ExtractionError,
    FileTooLargeError,
    MissingConfigurationError,
    MissingFileError,
    UnsupportedTypeError,
)
from document_extractor.extractor import PlainTextDecoder, StructuredDocumentParser
from document_extractor.handler import ExtractionDispatcher
from document_extractor.logger import setup_logging
from document_extractor.models import (
    ExtractionMetadata,
    ExtractionResponse,
    ExtractionResult,
    FileSubmission,
)
from document_extractor.parser import extract_document, submission_from_upload
from document_extractor.vision import OpticalTextExtractor

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "extract_document",
    "submission_from_upload",
    # Core classes
    "ExtractionDispatcher",
    "PlainTextDecoder",
    "StructuredDocumentParser",
    "OpticalTextExtractor",
    # Classification
    "classify",
    "is_supported",
    "SUPPORTED_CONTENT_TYPES",
    "FileCategory",
    "FileFamily",
    "FileKind",
    # Data models
    "FileSubmission",
    "ExtractionResult",
    "ExtractionMetadata",
    "ExtractionResponse",
    # Configuration
    "ExtractorConfig",
    "VisionConfig",
    "DocumentConfig",
    "MAX_FILE_SIZE_BYTES",
    "setup_logging",
    # Exceptions
    "DocumentExtractorError",
    "MissingConfigurationError",
    "MissingFileError",
    "FileTooLargeError",
    "UnsupportedTypeError",
    "ExtractionError",
]
