"""
Retrieval — vector indexing and similarity search.

This module wraps the vector store behind a clean interface so that the
chat layer never needs to know which index is backing retrieval.

Public surface
--------------
- :class:`SemanticRetriever` — main entry point for retrieval with citations.
- :class:`VectorStoreBase` — abstract append-only backend.
- :class:`ChromaVectorStore` — default in-memory Chroma backend.
- :class:`Citation`, :class:`RetrievalResult` — data models.
"""

from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.models import Citation, RetrievalResult
from pdf_chat.retrieval.retriever import SemanticRetriever, StoreRetriever

__all__ = [
    "ChromaVectorStore",
    "Citation",
    "RetrievalResult",
    "SemanticRetriever",
    "StoreRetriever",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from pdf_chat.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
