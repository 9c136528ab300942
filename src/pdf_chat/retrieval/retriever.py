"""Semantic retriever — similarity search with provenance tracking.

Usage::

    from pdf_chat.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever(store)
    results   = retriever.search("What is the warranty period?")
    for r in results:
        print(r.citation.page, r.content[:80])

The chat chains consume it through :meth:`SemanticRetriever.as_langchain_retriever`.
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.callbacks import CallbackManagerForRetrieverRun
from langchain_core.documents import Document
from langchain_core.retrievers import BaseRetriever
from pydantic import ConfigDict

from pdf_chat.config import settings
from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.models import Citation, RetrievalResult

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever that wraps any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.  When *None*, a fresh in-memory
        :class:`~pdf_chat.retrieval.chroma_store.ChromaVectorStore` is
        created.
    default_k:
        Default number of results returned by :meth:`search`.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        *,
        default_k: int = settings.retrieval_k,
    ) -> None:
        if store is None:
            from pdf_chat.retrieval.chroma_store import ChromaVectorStore

            store = ChromaVectorStore()
        self._store = store
        self.default_k = default_k

    @property
    def store(self) -> VectorStoreBase:
        return self._store

    # -- public API -----------------------------------------------------------

    def search(self, query: str, *, k: int | None = None) -> list[RetrievalResult]:
        """Run a semantic search and return results with citations.

        Parameters
        ----------
        query:
            Natural-language query string.
        k:
            Number of results (defaults to ``self.default_k``).

        Returns
        -------
        list[RetrievalResult]
            Results ranked by similarity, each carrying a :class:`Citation`.
        """
        k = k or self.default_k
        raw_hits = self._store.similarity_search_by_text(query, k=k)
        results = self._to_results(raw_hits)
        logger.debug("search(%r) returned %d result(s)", query, len(results))
        return results

    def as_langchain_retriever(self, k: int | None = None) -> BaseRetriever:
        """Return a LangChain-compatible retriever usable inside runnable chains."""
        return StoreRetriever(retriever=self, k=k or self.default_k)

    # -- internals ------------------------------------------------------------

    def _to_results(self, raw_hits: list[dict[str, Any]]) -> list[RetrievalResult]:
        results: list[RetrievalResult] = []
        for hit in raw_hits:
            score = hit.get("score")
            meta = hit.get("metadata", {})
            citation = Citation(
                document_id=hit.get("id"),
                page=meta.get("loc", {}).get("page_number"),
                chunk_index=meta.get("chunk_index"),
                score=score,
                metadata=meta,
            )
            results.append(RetrievalResult(content=hit.get("content", ""), citation=citation))
        return results


class StoreRetriever(BaseRetriever):
    """Adapter that satisfies LangChain's retriever protocol."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    retriever: SemanticRetriever
    k: int = settings.retrieval_k

    def _get_relevant_documents(
        self, query: str, *, run_manager: CallbackManagerForRetrieverRun
    ) -> list[Document]:
        return [result.to_document() for result in self.retriever.search(query, k=self.k)]
