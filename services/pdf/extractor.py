"""
PDF Text Extraction Service

Converts uploaded PDF bytes into cleaned plain text for the study flows.

Failures are typed so the API can tell the user what to do:
  - EncryptedPDFError:      password-protected document
  - CorruptPDFError:        structurally broken file (e.g. bad xref table)
  - NoExtractableTextError: empty or image-only document (scan without OCR)
"""

import io
import logging
import re
from dataclasses import dataclass

from pypdf import PdfReader
from pypdf.errors import DependencyError, FileNotDecryptedError, PdfReadError

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 10

_WHITESPACE_RE = re.compile(r"\s+")


class PDFExtractionError(Exception):
    """Base class for PDF extraction failures."""
    pass


class EmptyUploadError(PDFExtractionError):
    """No file content was received."""
    pass


class EncryptedPDFError(PDFExtractionError):
    """The PDF is password-protected."""
    pass


class CorruptPDFError(PDFExtractionError):
    """The PDF structure could not be read."""
    pass


class NoExtractableTextError(PDFExtractionError):
    """The PDF has no (or too little) extractable text."""
    pass


@dataclass
class ExtractedDocument:
    """Result of PDF text extraction."""
    text: str
    page_count: int

    @property
    def characters(self) -> int:
        return len(self.text)


def clean_text(raw_text: str) -> str:
    """Normalize line endings, collapse whitespace runs and trim."""
    text = (raw_text or "").replace("\r\n", "\n")
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_pdf_text(data: bytes) -> ExtractedDocument:
    """
    Extract and clean the text of a PDF.

    Args:
        data: Raw PDF bytes

    Returns:
        ExtractedDocument with cleaned text and page count

    Raises:
        EmptyUploadError, EncryptedPDFError, CorruptPDFError, NoExtractableTextError
    """
    if not data:
        raise EmptyUploadError("No file was sent to the server.")

    try:
        reader = PdfReader(io.BytesIO(data))
    except PdfReadError as e:
        logger.warning(f"Unreadable PDF: {e}", extra={"file_size_bytes": len(data)})
        if "xref" in str(e).lower():
            raise CorruptPDFError(
                "The PDF has a corrupted or incompatible structure (bad XRef). "
                "Try saving the file again as PDF or use a different file."
            ) from e
        raise CorruptPDFError(f"The PDF could not be read: {e}") from e

    if reader.is_encrypted:
        try:
            # Owner-password-only files open with an empty user password.
            decrypted = reader.decrypt("")
        except (DependencyError, PdfReadError) as e:
            raise EncryptedPDFError("The PDF is password-protected and cannot be read.") from e
        if not decrypted:
            raise EncryptedPDFError("The PDF is password-protected and cannot be read.")

    chunks = []
    try:
        for index, page in enumerate(reader.pages):
            try:
                chunks.append(page.extract_text() or "")
            except (PdfReadError, KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable page {index + 1}: {e}")
        page_count = len(reader.pages)
    except FileNotDecryptedError as e:
        raise EncryptedPDFError("The PDF is password-protected and cannot be read.") from e
    except PdfReadError as e:
        raise CorruptPDFError(f"The PDF could not be read: {e}") from e

    text = clean_text("\n".join(chunks))

    if not text:
        raise NoExtractableTextError("The PDF appears to be empty or has no extractable text.")

    if len(text) < MIN_TEXT_CHARS:
        raise NoExtractableTextError(
            "The extracted text is too short to generate questions. "
            "Check that the document is not made of images only (scans without OCR)."
        )

    logger.info(
        f"Extracted {len(text)} characters from {page_count} pages",
        extra={"page_count": page_count, "characters": len(text)},
    )
    return ExtractedDocument(text=text, page_count=page_count)
