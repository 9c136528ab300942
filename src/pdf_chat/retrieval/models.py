"""Domain models for retrieval results and provenance tracking."""

from __future__ import annotations

from typing import Any

from langchain_core.documents import Document
from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Provenance record linking a retrieved chunk back to its PDF page.

    Attributes
    ----------
    document_id:
        The vector-store ID of the chunk (``None`` when unknown).
    page:
        1-based page number the chunk was cut from.
    chunk_index:
        Insertion order of the chunk within the index.
    score:
        Similarity score returned by the vector store.
    metadata:
        The full metadata the chunk was indexed with.
    """

    document_id: str | None = None
    page: int | None = None
    chunk_index: int | None = None
    score: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class RetrievalResult(BaseModel):
    """A single retrieved passage together with its citation."""

    content: str
    citation: Citation

    def to_document(self) -> Document:
        """Convert back to a LangChain ``Document`` with the indexed metadata."""
        metadata = {**self.citation.metadata}
        if self.citation.score is not None:
            metadata["score"] = self.citation.score
        return Document(page_content=self.content, metadata=metadata)
