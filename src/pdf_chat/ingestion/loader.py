"""PDF loading — decode a data-URL payload and extract per-page documents."""

from __future__ import annotations

import base64
import logging
from io import BytesIO
from typing import Any

from langchain_core.documents import Document
from pypdf import PdfReader

logger = logging.getLogger(__name__)


def decode_data_url(data_url: str) -> bytes:
    """Return the raw bytes carried by a base64 ``data:`` URL.

    Only the part after the first comma is decoded, so the media type
    prefix is ignored.  A payload without a comma is rejected with
    ``ValueError``; malformed base64 raises ``binascii.Error``.
    """
    _, sep, encoded = data_url.partition(",")
    if not sep:
        raise ValueError("Expected a data URL of the form 'data:<mime>;base64,<payload>'")
    return base64.b64decode(encoded)


def _read_document_metadata(reader: PdfReader) -> dict[str, Any]:
    """Collect document-level metadata, tolerating unreadable info dictionaries."""
    version = reader.pdf_header.removeprefix("%PDF-") or None
    info: dict[str, str] | None
    try:
        raw_info = reader.metadata
        # Indexing resolves indirect objects; .items() would not.
        info = {str(key).lstrip("/"): str(raw_info[key]) for key in raw_info} if raw_info else None
    except Exception:
        logger.warning("Could not read PDF document info; continuing without it", exc_info=True)
        info = None
    return {"version": version, "info": info, "total_pages": len(reader.pages)}


def load_pdf_bytes(data: bytes) -> list[Document]:
    """Parse *data* as a PDF and return one ``Document`` per non-empty page.

    Parameters
    ----------
    data:
        Raw PDF bytes.

    Returns
    -------
    list[Document]
        Page documents.  Each carries ``metadata["pdf"]`` (version, info,
        total_pages) and ``metadata["loc"]["page_number"]`` (1-based).
        Pages without extractable text are skipped.

    Raises
    ------
    pypdf.errors.PdfReadError
        When *data* is not a readable PDF.
    """
    reader = PdfReader(BytesIO(data))
    pdf_meta = _read_document_metadata(reader)

    documents: list[Document] = []
    for page_number, page in enumerate(reader.pages, 1):
        text = page.extract_text() or ""
        if not text.strip():
            logger.debug("Skipping page %d: no extractable text", page_number)
            continue
        documents.append(
            Document(
                page_content=text,
                metadata={
                    "pdf": dict(pdf_meta),
                    "loc": {"page_number": page_number},
                },
            )
        )

    logger.info(
        "Extracted text from %d of %d page(s)", len(documents), pdf_meta["total_pages"]
    )
    return documents


def load_pdf_data_url(data_url: str) -> list[Document]:
    """Decode a data-URL payload and load its pages."""
    return load_pdf_bytes(decode_data_url(data_url))
