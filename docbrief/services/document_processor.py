import io
import re

import mammoth
import PyPDF2

from docbrief.core.config import settings, PLAIN_TEXT_TYPE, PDF_TYPE, DOCX_TYPE
from docbrief.core.exceptions import ExtractionError, UnreadableContentError
from docbrief.models.document import SourceDocument, ExtractedText
from docbrief.utils.logger import logger
from docbrief.utils.validators import validate_file_size, validate_content_type

UNREADABLE_MESSAGES = {
    "pdf": (
        "Could not extract readable text from PDF. The PDF might be image-based or encrypted. "
        "Please ensure the PDF contains selectable text or try converting to TXT format."
    ),
    "docx": (
        "Could not extract readable text from DOCX. The document might be corrupted or heavily "
        "formatted. Please try converting to TXT format."
    ),
    "text": "No text content found in file",
}

FORMAT_BY_TYPE = {
    PLAIN_TEXT_TYPE: "text",
    PDF_TYPE: "pdf",
    DOCX_TYPE: "docx",
}


class DocumentProcessor:
    def __init__(self, max_file_size: int = None, min_text_length: int = None):
        self.max_file_size = max_file_size or settings.MAX_FILE_SIZE
        self.min_text_length = min_text_length or settings.MIN_TEXT_LENGTH

    def process(self, document: SourceDocument) -> ExtractedText:
        """Validate, extract and normalize an uploaded document.

        Size and type are checked before any parsing. The minimum-length check
        runs on the raw extracted text; the returned content has its
        whitespace collapsed.
        """
        logger.info(
            f"Processing file: {document.filename} Type: {document.content_type} Size: {document.size_bytes}"
        )
        validate_file_size(max(document.size_bytes, len(document.data)), self.max_file_size)
        validate_content_type(document.content_type)

        raw = self.extract(document.data, document.content_type)
        fmt = FORMAT_BY_TYPE[document.content_type]
        if len(raw.content.strip()) < self.min_text_length:
            logger.warning(f"Extracted text below {self.min_text_length} characters from {document.filename}")
            raise UnreadableContentError(fmt, UNREADABLE_MESSAGES[fmt])

        logger.info(f"Extracted text length: {raw.length}")
        logger.debug(f"Text preview: {raw.content[:200]}...")
        return ExtractedText(content=self._clean_text(raw.content))

    def extract(self, data: bytes, content_type: str) -> ExtractedText:
        """Convert a payload of the given MIME type into raw text"""
        validate_content_type(content_type)

        if content_type == PLAIN_TEXT_TYPE:
            text = data.decode("utf-8", errors="replace")
        elif content_type == PDF_TYPE:
            logger.info("Processing PDF file...")
            text = self._extract_text_from_pdf(data)
        else:
            logger.info("Processing DOCX file...")
            text = self._extract_text_from_docx(data)

        return ExtractedText(content=text)

    def _extract_text_from_pdf(self, data: bytes) -> str:
        """Extract text from PDF using PyPDF2"""
        pages = []
        try:
            pdf_reader = PyPDF2.PdfReader(io.BytesIO(data))
            if pdf_reader.is_encrypted:
                # Owner-password-only PDFs open with an empty user password
                pdf_reader.decrypt("")

            for page_num, page in enumerate(pdf_reader.pages):
                try:
                    page_text = page.extract_text() or ""
                except Exception as e:
                    logger.warning(f"Error extracting text from page {page_num + 1}: {e}")
                    continue
                if page_text.strip():
                    pages.append(page_text)
        except Exception as e:
            logger.error(f"PDF extraction error: {e}")
            raise ExtractionError("pdf", original_error=e) from e

        return "\n\n".join(pages)

    def _extract_text_from_docx(self, data: bytes) -> str:
        """Extract raw paragraph text from DOCX using mammoth"""
        try:
            result = mammoth.extract_raw_text(io.BytesIO(data))
        except Exception as e:
            logger.error(f"DOCX extraction error: {e}")
            raise ExtractionError("docx", original_error=e) from e

        for message in result.messages:
            logger.debug(f"mammoth: {message}")
        return result.value or ""

    def _clean_text(self, text: str) -> str:
        """Collapse every whitespace run to a single space"""
        return re.sub(r'\s+', ' ', text).strip()
