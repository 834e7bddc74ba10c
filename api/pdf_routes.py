"""
PDF Upload Endpoint

Receives raw PDF bytes (Content-Type: application/pdf) and returns the
cleaned text the study flows consume.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from config import Config
from services.pdf import PDFExtractionError, extract_pdf_text

from .schemas import PdfExtractResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pdf", tags=["PDF"])

MIB = 1024 * 1024


def format_size_limit(limit: int) -> str:
    """Human-readable upload limit (MB from 1 MiB up, bytes below)."""
    if limit >= MIB:
        return f"{limit / MIB:g} MB"
    return f"{limit} bytes"


def _too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File exceeds the {format_size_limit(limit)} limit",
    )


async def read_limited_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, refusing it as soon as it passes limit bytes.

    A declared Content-Length over the limit is refused before reading.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise _too_large(limit)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise _too_large(limit)
    return bytes(body)


@router.post("/extract", response_model=PdfExtractResponse)
async def extract_pdf(request: Request) -> PdfExtractResponse:
    """
    Extract text from an uploaded PDF.

    Raises:
        HTTPException(413): File larger than MAX_PDF_BYTES
        HTTPException(422): Empty, encrypted, corrupt or image-only PDF
    """
    body = await read_limited_body(request, Config.MAX_PDF_BYTES)

    try:
        document = await run_in_threadpool(extract_pdf_text, body)
    except PDFExtractionError as e:
        logger.warning(
            f"PDF extraction failed: {e}",
            extra={"error_type": type(e).__name__, "file_size_bytes": len(body)},
        )
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return PdfExtractResponse(
        text=document.text,
        characters=document.characters,
        page_count=document.page_count,
    )
