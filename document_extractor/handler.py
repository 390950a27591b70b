"""Extraction dispatcher."""

from typing import Optional

from document_extractor.classifier import FileCategory, FileFamily, classify
from document_extractor.config import ExtractorConfig
from document_extractor.envelope import error_response, success_response
from document_extractor.exceptions import (
    DocumentExtractorError,
    ExtractionError,
    FileTooLargeError,
    MissingConfigurationError,
    MissingFileError,
)
from document_extractor.extractor import (
    PlainTextDecoder,
    StructuredDocumentParser,
    TextExtractor,
)
from document_extractor.logger import Timer, get_logger, request_context
from document_extractor.models import ExtractionResponse, ExtractionResult, FileSubmission
from document_extractor.vision import OpticalTextExtractor

logger = get_logger(__name__)


class ExtractionDispatcher:
    """Validate a submission, route it to one strategy, and wrap the outcome.

    The dispatcher holds configuration and strategy objects only, never
    per-request state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        text_decoder: Optional[TextExtractor] = None,
        document_parser: Optional[TextExtractor] = None,
        image_extractor: Optional[TextExtractor] = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Extractor configuration. If None, uses defaults.
            text_decoder: Strategy for plain text. If None, creates default.
            document_parser: Strategy for PDF/DOC/DOCX. If None, creates default.
            image_extractor: Strategy for images. If None, creates default.
        """
        self.config = config or ExtractorConfig()
        self.strategies: dict[FileFamily, TextExtractor] = {
            FileFamily.PLAIN_TEXT: text_decoder or PlainTextDecoder(),
            FileFamily.STRUCTURED_DOCUMENT: document_parser
            or StructuredDocumentParser(self.config.document),
            FileFamily.IMAGE: image_extractor or OpticalTextExtractor(self.config.vision),
        }

    def extract(self, submission: Optional[FileSubmission]) -> ExtractionResponse:
        """Extract text from a submission.

        Never raises: every failure becomes an envelope with success=False,
        a human-readable error and the matching status code.
        """
        with request_context():
            try:
                return self._extract(submission)
            except DocumentExtractorError as exc:
                return error_response(submission, exc)
            except Exception as exc:
                logger.error(
                    "Unexpected extraction failure",
                    extra_data={
                        "file_name": submission.file_name if submission else "",
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                    exc_info=True,
                )
                return error_response(
                    submission, DocumentExtractorError(f"Internal error: {exc}")
                )

    def _extract(self, submission: Optional[FileSubmission]) -> ExtractionResponse:
        self.validate(submission)
        category = classify(submission.content_type)
        result = self.run_strategy(submission, category)
        if not result.is_ok:
            raise ExtractionError(category.label, result.error)
        return success_response(submission, result)

    def validate(self, submission: Optional[FileSubmission]) -> None:
        """Check preconditions in order, raising on the first failure.

        Raises:
            MissingConfigurationError: If the vision credential is unset
                (all requests when strict_credential_check is on)
            MissingFileError: If no submission was provided
            FileTooLargeError: If the file exceeds the size ceiling
        """
        if self.config.strict_credential_check and self.config.vision.resolve_api_key() is None:
            logger.error(
                "Vision backend credential missing",
                extra_data={"env_var": self.config.vision.api_key_env},
            )
            raise MissingConfigurationError(
                f"Service not configured: {self.config.vision.api_key_env} is not set"
            )

        if submission is None:
            logger.warning("Extraction requested without a file")
            raise MissingFileError()

        if submission.size > self.config.max_file_size_bytes:
            logger.warning(
                "File exceeds size limit",
                extra_data={
                    "file_name": submission.file_name,
                    "size_bytes": submission.size,
                    "limit_bytes": self.config.max_file_size_bytes,
                },
            )
            raise FileTooLargeError()

    def run_strategy(
        self, submission: FileSubmission, category: FileCategory
    ) -> ExtractionResult:
        """Invoke the single strategy registered for the category's family."""
        strategy = self.strategies.get(category.family)
        if strategy is None:
            raise RuntimeError(f"No extraction strategy for {category.family.value}")

        with Timer("extraction") as timer:
            try:
                text = strategy.extract(submission.content, category)
            except MissingConfigurationError:
                raise
            except Exception as exc:
                logger.error(
                    "Extraction strategy failed",
                    extra_data={
                        "file_name": submission.file_name,
                        "strategy": category.label,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                        "extraction_time_ms": timer.get_elapsed_ms(),
                    },
                )
                return ExtractionResult.err(str(exc) or type(exc).__name__)

        logger.info(
            "Extraction completed",
            extra_data={
                "file_name": submission.file_name,
                "content_type": submission.content_type,
                "strategy": category.label,
                "characters_extracted": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return ExtractionResult.ok(text)
