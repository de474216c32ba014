"""Data URI handling and PDF text extraction for providers that cannot read files."""

import base64
import binascii
import logging
import re
from io import BytesIO
from typing import NamedTuple

import pdfplumber

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]+);base64,(?P<data>.*)$", re.S)


class DataURI(NamedTuple):
    """A decoded ``data:<mimetype>;base64,<encoded_data>`` payload."""

    mime_type: str
    data: str  # base64, as received

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data, validate=False)


def parse_data_uri(uri: str) -> DataURI:
    """
    Split a data URI into MIME type and base64 payload.

    Raises:
        ValueError: If the string is not a base64 data URI.
    """
    match = _DATA_URI_RE.match(uri.strip())
    if not match:
        raise ValueError("Expected a data URI of the form data:<mimetype>;base64,<encoded_data>")
    data = re.sub(r"\s+", "", match.group("data"))
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return DataURI(mime_type=match.group("mime"), data=data)


def to_data_uri(content: bytes, mime_type: str = "application/pdf") -> str:
    """Encode raw bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def extract_text_from_pdf(file_content: bytes) -> str:
    """
    Pull the text layer out of a PDF, one block per page.

    Scanned documents without a text layer are rejected.

    Raises:
        ValueError: If the PDF cannot be opened or has no extractable text.
    """
    try:
        with pdfplumber.open(BytesIO(file_content)) as pdf:
            pages = [(page.extract_text() or "").strip() for page in pdf.pages]
    except Exception as e:
        logger.error(f"Could not open PDF: {e}")
        raise ValueError(f"Failed to read PDF: {e}") from e

    text_pages = [text for text in pages if text]
    if not text_pages:
        raise ValueError("No text could be extracted from PDF")

    logger.debug(f"Extracted text from {len(text_pages)}/{len(pages)} PDF pages")
    return "\n\n".join(text_pages)
