"""Local extraction strategies: plain text and structured documents."""

import io
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Protocol

import fitz  # PyMuPDF
import pymupdf4llm
from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph

from document_extractor.classifier import FileCategory, FileFamily, FileKind
from document_extractor.config import DocumentConfig
from document_extractor.logger import Timer, get_logger

logger = get_logger(__name__)


class TextExtractor(Protocol):
    """Anything that turns file bytes of a given category into text.

    Implementations raise on failure; the dispatcher owns error shaping.
    """

    def extract(self, file_bytes: bytes, category: FileCategory) -> str:
        ...


class PlainTextDecoder:
    """Decode plain text files as UTF-8, replacing malformed sequences."""

    def extract(self, file_bytes: bytes, category: FileCategory) -> str:
        text = file_bytes.decode("utf-8", errors="replace")
        logger.debug(
            "Decoded plain text",
            extra_data={
                "size_bytes": len(file_bytes),
                "characters_extracted": len(text),
                "replacements": text.count("\ufffd"),
            },
        )
        return text


class StructuredDocumentParser:
    """Text-layer extraction for PDF, DOCX and legacy DOC files.

    PyMuPDF reads PDFs in memory, python-docx reads DOCX, and legacy .doc
    files go through whichever system converter is installed (textutil on
    macOS, LibreOffice elsewhere).
    """

    def __init__(self, config: Optional[DocumentConfig] = None):
        self.config = config or DocumentConfig()

    def extract(self, file_bytes: bytes, category: FileCategory) -> str:
        if category.family is not FileFamily.STRUCTURED_DOCUMENT:
            raise ValueError(f"Not a structured document: {category.kind.value}")

        if category.kind is FileKind.PDF:
            return self._extract_pdf(file_bytes)
        if category.kind is FileKind.DOCX:
            return self._extract_docx(file_bytes)
        if category.kind is FileKind.DOC:
            return self._extract_doc(file_bytes)
        raise ValueError(f"Unsupported document kind: {category.kind.value}")

    def _extract_pdf(self, file_bytes: bytes) -> str:
        with fitz.open(stream=file_bytes, filetype="pdf") as doc:
            if doc.needs_pass:
                raise ValueError("PDF is encrypted and requires a password")

            with Timer("pdf_extraction") as timer:
                if self.config.pdf_output == "markdown":
                    text = pymupdf4llm.to_markdown(
                        doc,
                        table_strategy="lines_strict",
                        force_text=True,
                        write_images=False,
                        ignore_images=True,
                        fontsize_limit=self.config.fontsize_limit,
                        show_progress=False,
                    ).strip()
                else:
                    pages = [page.get_text("text").strip() for page in doc]
                    text = "\n\n".join(page for page in pages if page)

            logger.debug(
                "PDF extraction completed",
                extra_data={
                    "page_count": doc.page_count,
                    "output": self.config.pdf_output,
                    "characters_extracted": len(text),
                    "extraction_time_ms": timer.get_elapsed_ms(),
                },
            )
            return text

    def _extract_docx(self, file_bytes: bytes) -> str:
        with Timer("docx_extraction") as timer:
            doc = Document(io.BytesIO(file_bytes))

            blocks = []
            paragraph_count = 0
            table_count = 0
            # Body order: paragraphs and tables interleaved as they appear
            for item in doc.iter_inner_content():
                if isinstance(item, Paragraph):
                    text = item.text.strip()
                    if text:
                        blocks.append(text)
                        paragraph_count += 1
                elif isinstance(item, Table):
                    rows = self._table_rows(item)
                    if rows:
                        blocks.append("\n".join(rows))
                        table_count += 1

            result = "\n".join(blocks)

        logger.debug(
            "DOCX extraction completed",
            extra_data={
                "paragraph_count": paragraph_count,
                "table_count": table_count,
                "characters_extracted": len(result),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    @staticmethod
    def _table_rows(table: Table) -> list[str]:
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append("\t".join(cells))
        return rows

    def _extract_doc(self, file_bytes: bytes) -> str:
        """Convert legacy .doc with textutil (macOS) or LibreOffice."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            source = Path(tmp_dir) / "document.doc"
            source.write_bytes(file_bytes)

            if shutil.which("textutil"):
                with Timer("doc_textutil") as timer:
                    result = subprocess.run(
                        ["textutil", "-convert", "txt", str(source), "-stdout"],
                        capture_output=True,
                        text=True,
                        timeout=self.config.converter_timeout,
                    )
                if result.returncode == 0:
                    logger.debug(
                        "DOC extraction completed via textutil",
                        extra_data={
                            "characters_extracted": len(result.stdout),
                            "extraction_time_ms": timer.get_elapsed_ms(),
                        },
                    )
                    return result.stdout.strip()
                logger.warning(
                    "textutil conversion failed",
                    extra_data={"returncode": result.returncode, "stderr": result.stderr.strip()},
                )

            soffice = shutil.which("soffice") or shutil.which("libreoffice")
            if soffice:
                out_dir = Path(tmp_dir) / "out"
                with Timer("doc_soffice") as timer:
                    result = subprocess.run(
                        [
                            soffice,
                            "--headless",
                            "--convert-to",
                            "txt:Text",
                            str(source),
                            "--outdir",
                            str(out_dir),
                        ],
                        capture_output=True,
                        text=True,
                        timeout=self.config.converter_timeout,
                    )
                out_path = out_dir / f"{source.stem}.txt"
                if result.returncode == 0 and out_path.exists():
                    content = out_path.read_text(encoding="utf-8", errors="replace").strip()
                    logger.debug(
                        "DOC extraction completed via soffice",
                        extra_data={
                            "characters_extracted": len(content),
                            "extraction_time_ms": timer.get_elapsed_ms(),
                        },
                    )
                    return content
                raise RuntimeError(
                    f"LibreOffice could not convert the document (exit code {result.returncode})"
                )

        raise RuntimeError(
            "No .doc converter available. Install textutil (macOS) or LibreOffice, "
            "or convert the file to DOCX."
        )
