from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from app.core.errors import ResumeExtractionError, ResumeExtractionTimeout, ValidationError
from app.core.matching_config import get_matching_value

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[\w.-]+)*;base64,", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

PDF_MIME = "application/pdf"
TEXT_MIME = "text/plain"


@dataclass(frozen=True)
class DecodedResume:
    mime: str
    content: bytes


def decode_resume_payload(payload: str) -> DecodedResume:
    if not isinstance(payload, str) or not payload.strip():
        raise ValidationError("Resume data must be a non-empty string")

    data = payload.strip()
    mime = PDF_MIME
    prefix = _DATA_URI_RE.match(data)
    if prefix:
        mime = (prefix.group("mime") or PDF_MIME).lower()
        data = data[prefix.end() :]

    if mime not in {PDF_MIME, TEXT_MIME}:
        raise ValidationError(f"Unsupported resume type '{mime}'. Supported types: PDF, plain text")

    try:
        content = base64.b64decode(_WHITESPACE_RE.sub("", data), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"Invalid base64 data: {exc}") from exc
    if not content:
        raise ValidationError("Invalid base64 data: buffer is empty after conversion")
    return DecodedResume(mime=mime, content=content)


def extract_pdf_text(content: bytes) -> str:
    try:
        reader = PdfReader(BytesIO(content))
        parts = [(page.extract_text() or "").strip() for page in reader.pages]
    except (PyPdfError, ValueError, KeyError, TypeError) as exc:
        raise ResumeExtractionError(f"Failed to parse PDF: {exc}") from exc
    return "\n".join(part for part in parts if part)


async def extract_resume_text(payload: str, *, timeout_s: float | None = None) -> str:
    """Decode an uploaded resume and return its plain text.

    PDF parsing runs in a worker thread and is abandoned after ``timeout_s``.
    """
    decoded = decode_resume_payload(payload)
    limit = float(get_matching_value("upload.extraction_timeout_s", 10) if timeout_s is None else timeout_s)

    if decoded.mime == TEXT_MIME:
        text = decoded.content.decode("utf-8", errors="replace")
    else:
        try:
            text = await asyncio.wait_for(asyncio.to_thread(extract_pdf_text, decoded.content), timeout=limit)
        except asyncio.TimeoutError as exc:
            logger.warning("resume_extraction_timeout bytes=%s timeout_s=%s", len(decoded.content), limit)
            raise ResumeExtractionTimeout(limit) from exc

    if not text.strip():
        raise ResumeExtractionError("Extracted text is empty")
    logger.info("resume_extracted mime=%s bytes=%s chars=%s", decoded.mime, len(decoded.content), len(text))
    return text
