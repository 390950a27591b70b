"""Content type classification."""

from dataclasses import dataclass
from enum import Enum

from document_extractor.exceptions import UnsupportedTypeError
from document_extractor.logger import get_logger

logger = get_logger(__name__)


class FileFamily(str, Enum):
    """Extraction family. Each family is served by exactly one strategy."""

    PLAIN_TEXT = "text"
    STRUCTURED_DOCUMENT = "document"
    IMAGE = "image"


class FileKind(str, Enum):
    TEXT = "text"
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"


@dataclass(frozen=True)
class FileCategory:
    family: FileFamily
    kind: FileKind

    @property
    def label(self) -> str:
        """Human-readable strategy label used in error messages."""
        if self.family is FileFamily.IMAGE:
            return "Image"
        if self.family is FileFamily.PLAIN_TEXT:
            return "Text"
        return self.kind.value.upper()


PLAIN_TEXT = FileCategory(FileFamily.PLAIN_TEXT, FileKind.TEXT)
PDF = FileCategory(FileFamily.STRUCTURED_DOCUMENT, FileKind.PDF)
DOC = FileCategory(FileFamily.STRUCTURED_DOCUMENT, FileKind.DOC)
DOCX = FileCategory(FileFamily.STRUCTURED_DOCUMENT, FileKind.DOCX)
PNG = FileCategory(FileFamily.IMAGE, FileKind.PNG)
JPEG = FileCategory(FileFamily.IMAGE, FileKind.JPEG)
WEBP = FileCategory(FileFamily.IMAGE, FileKind.WEBP)

# Exact-match table. Content types are compared verbatim, never sniffed.
CONTENT_TYPES: dict[str, FileCategory] = {
    "application/pdf": PDF,
    "application/msword": DOC,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DOCX,
    "image/png": PNG,
    "image/jpeg": JPEG,
    "image/jpg": JPEG,
    "image/webp": WEBP,
    "text/plain": PLAIN_TEXT,
}

SUPPORTED_CONTENT_TYPES = frozenset(CONTENT_TYPES)


def is_supported(content_type: str) -> bool:
    return content_type in CONTENT_TYPES


def classify(content_type: str) -> FileCategory:
    """Resolve a declared content type to its file category.

    Args:
        content_type: MIME type exactly as declared by the caller

    Returns:
        The matching FileCategory

    Raises:
        UnsupportedTypeError: If the content type is not in the table
    """
    category = CONTENT_TYPES.get(content_type)
    if category is None:
        logger.warning(
            "Unsupported content type",
            extra_data={"content_type": content_type},
        )
        raise UnsupportedTypeError(content_type)

    logger.debug(
        "Content type classified",
        extra_data={
            "content_type": content_type,
            "family": category.family.value,
            "kind": category.kind.value,
        },
    )
    return category
