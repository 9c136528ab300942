"""
Ingestion — PDF decoding, page extraction, chunking, and embedding.

Turns a data-URL encoded PDF into chunked LangChain documents ready to be
inserted into the vector store.
"""

from pdf_chat.ingestion.chunker import chunk_documents
from pdf_chat.ingestion.loader import decode_data_url, load_pdf_bytes, load_pdf_data_url

__all__ = [
    "chunk_documents",
    "decode_data_url",
    "load_pdf_bytes",
    "load_pdf_data_url",
]
