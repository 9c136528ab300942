"""
Worker — the orchestrator and its message-passing surface.

Public API
----------
- :class:`RAGSession` — ingest and query flows over one vector store.
- :class:`Worker` — serial inbound-message handler relaying outbound events.
- :func:`parse_request` — validate inbound protocol messages.
"""

from pdf_chat.worker.protocol import (
    ChunkEvent,
    CompleteEvent,
    ErrorEvent,
    IngestRequest,
    LogEvent,
    QueryRequest,
    parse_request,
)
from pdf_chat.worker.runtime import Worker
from pdf_chat.worker.session import RAGSession

__all__ = [
    "ChunkEvent",
    "CompleteEvent",
    "ErrorEvent",
    "IngestRequest",
    "LogEvent",
    "QueryRequest",
    "RAGSession",
    "Worker",
    "parse_request",
]
