"""Pytest configuration and shared fixtures."""

import io
import zipfile
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from docbrief.core.config import Settings
from docbrief.services.completion_client import CompletionClient, GenerationConfig
from docbrief.services.document_processor import DocumentProcessor
from docbrief.services.pipeline import SummarizationPipeline
from docbrief.services.summary import SummaryService
from docbrief.services.translation import TranslationService


class FakeCompletionClient(CompletionClient):
    """Records every prompt and answers from a script.

    ``fail_on_call`` is 1-based; that call raises ``error`` instead of answering.
    """

    def __init__(
        self,
        responses: Optional[List[str]] = None,
        default: str = "Generated summary.",
        fail_on_call: Optional[int] = None,
        error: Optional[Exception] = None,
    ):
        self.responses = list(responses or [])
        self.default = default
        self.fail_on_call = fail_on_call
        self.error = error
        self.prompts: List[str] = []
        self.configs: List[GenerationConfig] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str, config: GenerationConfig) -> str:
        self.prompts.append(prompt)
        self.configs.append(config)
        if self.fail_on_call is not None and self.call_count == self.fail_on_call:
            raise self.error
        index = self.call_count - 1
        if index < len(self.responses):
            return self.responses[index]
        return self.default


async def no_delay(seconds: float) -> None:
    return None


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        GEMINI_API_KEY="test-gemini-key",
        TRANSLATION_API_KEY="test-translation-key",
        CHUNK_DELAY_SECONDS=0,
    )


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def summary_service(fake_client, test_settings) -> SummaryService:
    return SummaryService(client=fake_client, settings=test_settings, delay=no_delay)


def build_pipeline(summary_client, translation_client, settings, request_timeout=None) -> SummarizationPipeline:
    return SummarizationPipeline(
        processor=DocumentProcessor(settings.MAX_FILE_SIZE, settings.MIN_TEXT_LENGTH),
        summary_service=SummaryService(client=summary_client, settings=settings, delay=no_delay),
        translation_service=TranslationService(client=translation_client, settings=settings),
        request_timeout=request_timeout,
    )


@pytest.fixture
def test_client() -> TestClient:
    """FastAPI test client with dependency overrides reset afterwards"""
    from docbrief.main import app

    app.dependency_overrides = {}
    yield TestClient(app)
    app.dependency_overrides = {}


def make_pdf(page_texts: List[str]) -> bytes:
    """Build a small PDF with one Helvetica text line per page"""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        None,  # page tree, filled in below
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    kids = []
    for text in page_texts:
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1") if text else b""
        objects.append(b"<< /Length %d >>\nstream\n%s\nendstream" % (len(stream), stream))
        content_id = len(objects)
        objects.append(
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Resources << /Font << /F1 3 0 R >> >> /Contents %d 0 R >>" % content_id
        )
        kids.append(b"%d 0 R" % len(objects))
    objects[1] = b"<< /Type /Pages /Kids [%s] /Count %d >>" % (b" ".join(kids), len(kids))

    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(b"%d 0 obj\n%s\nendobj\n" % (number, body))
    xref_at = out.tell()
    out.write(b"xref\n0 %d\n" % (len(objects) + 1))
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(b"%010d 00000 n \n" % offset)
    out.write(b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at))
    return out.getvalue()


def make_docx(paragraphs: List[str]) -> bytes:
    """Build a minimal DOCX package with the given paragraphs"""
    body = "".join(f"<w:p><w:r><w:t>{p}</w:t></w:r></w:p>" for p in paragraphs)
    files = {
        "[Content_Types].xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
            '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
            '<Default Extension="xml" ContentType="application/xml"/>'
            '<Override PartName="/word/document.xml" '
            'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
            "</Types>"
        ),
        "_rels/.rels": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
            '<Relationship Id="rId1" '
            'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
            'Target="word/document.xml"/>'
            "</Relationships>"
        ),
        "word/_rels/document.xml.rels": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships"/>'
        ),
        "word/document.xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
            f"<w:body>{body}</w:body></w:document>"
        ),
    }
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return out.getvalue()
