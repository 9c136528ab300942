"""Unit tests for the retrieval layer — models, SemanticRetriever, and the LangChain adapter."""

from __future__ import annotations

from typing import Any

import pytest
from langchain_core.documents import Document

from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.models import Citation, RetrievalResult
from pdf_chat.retrieval.retriever import SemanticRetriever


# ── Canned store for deterministic ranking ──────────────────────────────


class CannedVectorStore(VectorStoreBase):
    """Returns canned hits in order, ignoring the query."""

    def __init__(self, hits: list[dict[str, Any]] | None = None) -> None:
        super().__init__("test-collection")
        self._hits: list[dict[str, Any]] = hits or []
        self.last_k: int | None = None

    def add_documents(self, documents: list[Document]) -> list[str]:
        raise NotImplementedError

    def similarity_search(self, query_embedding: list[float], *, k: int = 4) -> list[dict[str, Any]]:
        self.last_k = k
        return self._hits[:k]

    def similarity_search_by_text(self, query: str, *, k: int = 4) -> list[dict[str, Any]]:
        self.last_k = k
        return self._hits[:k]

    def count(self) -> int:
        return len(self._hits)


SAMPLE_HITS: list[dict[str, Any]] = [
    {
        "id": "chunk-001",
        "content": "The warranty covers parts and labour for two years.",
        "score": 0.92,
        "metadata": {"loc": {"page_number": 7}, "pdf": {"total_pages": 12}, "chunk_index": 3},
    },
    {
        "id": "chunk-002",
        "content": "Claims must be filed within 30 days.",
        "score": 0.87,
        "metadata": {"loc": {"page_number": 8}, "chunk_index": 4},
    },
    {
        "id": "chunk-003",
        "content": "The company was founded in 1987.",
        "score": 0.45,
        "metadata": {},
    },
]


@pytest.fixture()
def canned_store() -> CannedVectorStore:
    return CannedVectorStore(hits=SAMPLE_HITS)


@pytest.fixture()
def retriever(canned_store: CannedVectorStore) -> SemanticRetriever:
    return SemanticRetriever(store=canned_store, default_k=4)


# ── Citation model tests ───────────────────────────────────────────────


class TestCitation:
    def test_to_document_keeps_metadata_and_score(self) -> None:
        result = RetrievalResult(
            content="text",
            citation=Citation(score=0.5, metadata={"loc": {"page_number": 2}}),
        )
        doc = result.to_document()
        assert doc.page_content == "text"
        assert doc.metadata["loc"]["page_number"] == 2
        assert doc.metadata["score"] == 0.5


# ── SemanticRetriever tests ─────────────────────────────────────────────


class TestSemanticRetriever:
    def test_search_returns_results_with_citations(self, retriever: SemanticRetriever) -> None:
        results = retriever.search("warranty")
        assert len(results) == 3
        assert results[0].citation.document_id == "chunk-001"
        assert results[0].citation.page == 7
        assert results[0].citation.chunk_index == 3

    def test_default_k_is_forwarded(self, retriever: SemanticRetriever, canned_store: CannedVectorStore) -> None:
        retriever.search("warranty")
        assert canned_store.last_k == 4

    def test_explicit_k(self, retriever: SemanticRetriever) -> None:
        assert len(retriever.search("warranty", k=1)) == 1

    def test_missing_page_metadata(self, retriever: SemanticRetriever) -> None:
        assert retriever.search("anything")[2].citation.page is None

    def test_empty_store(self) -> None:
        assert SemanticRetriever(store=CannedVectorStore()).search("anything") == []


class TestLangChainAdapter:
    def test_invoke_returns_documents(self, retriever: SemanticRetriever) -> None:
        docs = retriever.as_langchain_retriever(k=2).invoke("warranty")
        assert [d.page_content for d in docs] == [SAMPLE_HITS[0]["content"], SAMPLE_HITS[1]["content"]]
        assert docs[0].metadata["loc"]["page_number"] == 7

    def test_adapter_uses_default_k(self, retriever: SemanticRetriever, canned_store: CannedVectorStore) -> None:
        retriever.as_langchain_retriever().invoke("warranty")
        assert canned_store.last_k == 4

    def test_fake_store_ranks_exact_match_first(self, fake_store) -> None:
        fake_store.add_documents(
            [Document(page_content=text) for text in ("alpha section", "beta section", "gamma section")]
        )
        docs = SemanticRetriever(store=fake_store).as_langchain_retriever(k=1).invoke("beta section")
        assert docs[0].page_content == "beta section"
