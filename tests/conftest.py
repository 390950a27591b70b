"""Shared fixtures for document extractor tests."""

import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import fitz  # PyMuPDF
import pytest
from docx import Document
from PIL import Image

from document_extractor.config import ExtractorConfig
from document_extractor.handler import ExtractionDispatcher
from document_extractor.vision import OpticalTextExtractor


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    """Provide the vision credential unless a test removes it."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def chat_response(content, refusal=None):
    """Build a minimal chat completion response object."""
    message = SimpleNamespace(content=content, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def vision_client():
    """Fake OpenAI client returning a fixed transcription."""
    client = MagicMock()
    client.chat.completions.create.return_value = chat_response("Invoice #42\nTotal: 10 EUR")
    return client


@pytest.fixture
def client_factory(vision_client):
    factory = MagicMock(return_value=vision_client)
    return factory


@pytest.fixture
def dispatcher(client_factory):
    """Dispatcher with real local strategies and a fake vision backend."""
    config = ExtractorConfig()
    return ExtractionDispatcher(
        config=config,
        image_extractor=OpticalTextExtractor(config.vision, client_factory=client_factory),
    )


@pytest.fixture
def simple_pdf():
    """Single page PDF with a text layer."""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Hello, World!")
    page.insert_text((72, 100), "This is a simple PDF document.")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def multi_page_pdf():
    doc = fitz.open()
    for i in range(3):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1} content")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def empty_pdf():
    """PDF with one page and no text."""
    doc = fitz.open()
    doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def encrypted_pdf():
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Secret content")
    data = doc.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="password",
    )
    doc.close()
    return data


@pytest.fixture
def simple_docx():
    """DOCX with a paragraph, a table, and a trailing paragraph."""
    doc = Document()
    doc.add_paragraph("First paragraph")
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "A1"
    table.cell(0, 1).text = "B1"
    table.cell(1, 0).text = "A2"
    table.cell(1, 1).text = "B2"
    doc.add_paragraph("")
    doc.add_paragraph("After table")
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def png_image():
    image = Image.new("RGB", (64, 32), color="white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_chat_response():
    return chat_response
