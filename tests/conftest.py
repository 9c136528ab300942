"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import base64
import math
from collections.abc import Callable
from typing import Any
from uuid import uuid4

import pytest
from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.documents import Document
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from pdf_chat.retrieval.base import VectorStoreBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── PDF generation ──────────────────────────────────────────────────────


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _text_stream(text: str) -> bytes:
    if not text:
        return b""
    lines = text.split("\n")
    shown = " T* ".join(f"({_escape_pdf_text(line)}) Tj" for line in lines)
    return f"BT /F1 10 Tf 12 TL 36 756 Td {shown} ET".encode("latin-1")


def build_pdf(pages: list[str], title: str | None = "Quarterly Report") -> bytes:
    """Return the bytes of a minimal PDF with one Helvetica text page per entry.

    An empty string produces a page without any text.
    """
    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for pid, text in zip(page_ids, pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {pid + 1} 0 R >>"
            ).encode()
        )
        stream = _text_stream(text)
        objects.append(f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream")
    info_ref = ""
    if title is not None:
        objects.append(f"<< /Title ({_escape_pdf_text(title)}) >>".encode("latin-1"))
        info_ref = f" /Info {len(objects)} 0 R"

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R{info_ref} >>\n".encode()
    out += f"startxref\n{xref_offset}\n".encode() + b"%%EOF\n"
    return bytes(out)


def to_data_url(data: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(data).decode("ascii")


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def make_pdf_data_url() -> Callable[..., str]:
    def _make(pages: list[str], title: str | None = "Quarterly Report") -> str:
        return to_data_url(build_pdf(pages, title=title))

    return _make


# ── Fake vector store ───────────────────────────────────────────────────


def _cosine(a: list[float], b: list[float]) -> float:
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return sum(x * y for x, y in zip(a, b)) / norm if norm else 0.0


class FakeVectorStore(VectorStoreBase):
    """In-memory store with deterministic fake embeddings that records every text query."""

    def __init__(self) -> None:
        super().__init__("test-collection")
        self._embedding = DeterministicFakeEmbedding(size=16)
        self.rows: list[dict[str, Any]] = []
        self.queries: list[str] = []

    def add_documents(self, documents: list[Document]) -> list[str]:
        ids: list[str] = []
        for doc in documents:
            doc_id = uuid4().hex
            self.rows.append(
                {
                    "id": doc_id,
                    "content": doc.page_content,
                    "metadata": {**doc.metadata, "chunk_index": len(self.rows)},
                    "embedding": self._embedding.embed_query(doc.page_content),
                }
            )
            ids.append(doc_id)
        return ids

    def similarity_search(self, query_embedding: list[float], *, k: int = 4) -> list[dict[str, Any]]:
        scored = [
            {
                "id": row["id"],
                "content": row["content"],
                "metadata": row["metadata"],
                "score": _cosine(query_embedding, row["embedding"]),
            }
            for row in self.rows
        ]
        scored.sort(key=lambda hit: hit["score"], reverse=True)
        return scored[:k]

    def similarity_search_by_text(self, query: str, *, k: int = 4) -> list[dict[str, Any]]:
        self.queries.append(query)
        return self.similarity_search(self._embedding.embed_query(query), k=k)

    def count(self) -> int:
        return len(self.rows)


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


# ── Fake chat model ─────────────────────────────────────────────────────


class ChatCallRecorder(BaseCallbackHandler):
    """Records the messages of every chat-model call."""

    def __init__(self) -> None:
        self.calls: list[list[Any]] = []

    def on_chat_model_start(self, serialized: dict[str, Any], messages: list[list[Any]], **kwargs: Any) -> None:
        self.calls.append(messages[0])


@pytest.fixture()
def recorder() -> ChatCallRecorder:
    return ChatCallRecorder()


@pytest.fixture()
def make_llm(recorder: ChatCallRecorder) -> Callable[[list[str]], FakeListChatModel]:
    """Build a fake chat model answering with *responses* in order, recorded by ``recorder``."""

    def _make(responses: list[str]) -> FakeListChatModel:
        return FakeListChatModel(responses=responses, callbacks=[recorder])

    return _make
