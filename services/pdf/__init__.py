"""
PDF Services Module

Handles study material ingestion:
  - Text extraction
  - Whitespace normalization
  - Typed failures for encrypted, corrupt and image-only documents
"""

from .extractor import (
    MIN_TEXT_CHARS,
    CorruptPDFError,
    EmptyUploadError,
    EncryptedPDFError,
    ExtractedDocument,
    NoExtractableTextError,
    PDFExtractionError,
    clean_text,
    extract_pdf_text,
)

__all__ = [
    "MIN_TEXT_CHARS",
    "CorruptPDFError",
    "EmptyUploadError",
    "EncryptedPDFError",
    "ExtractedDocument",
    "NoExtractableTextError",
    "PDFExtractionError",
    "clean_text",
    "extract_pdf_text",
]
