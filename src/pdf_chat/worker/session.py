"""RAG session — the orchestrator for the ingest and query flows.

A :class:`RAGSession` owns the collaborators a conversation needs (vector
store, retriever, chat model) for the lifetime of the process.  Build one
per worker and pass it by reference; tests build isolated sessions with
fake stores and fake chat models.

Flows
-----
* **ingest** — data URL → PDF pages → 500/50 character chunks → index.
* **query** — ``retrieving`` (optional standalone-question rewrite, then
  similarity search) → ``generating`` (streamed answer fragments).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pdf_chat.chat.chains import create_response_chain, create_standalone_question_chain
from pdf_chat.chat.messages import render_history, split_conversation, to_langchain_messages
from pdf_chat.chat.prompts import format_docs
from pdf_chat.config import settings
from pdf_chat.ingestion.chunker import chunk_documents
from pdf_chat.ingestion.loader import load_pdf_data_url
from pdf_chat.retrieval.retriever import SemanticRetriever

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from langchain_core.documents import Document
    from langchain_core.language_models import BaseChatModel

    from pdf_chat.chat.messages import ChatMessage
    from pdf_chat.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class RAGSession:
    """Process-lifetime state shared by the ingest and query flows.

    Parameters
    ----------
    store:
        Vector-store backend.  Defaults to a fresh in-memory Chroma store
        embedding with the configured sentence-transformer.
    llm:
        Chat model used for question rewriting and answering.  Defaults
        to :func:`pdf_chat.chat.llm.get_llm`.
    retrieval_k:
        Number of chunks retrieved per question.
    chunk_size, chunk_overlap:
        Character window used when splitting pages.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        llm: BaseChatModel | None = None,
        *,
        retrieval_k: int = settings.retrieval_k,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
    ) -> None:
        if store is None:
            from pdf_chat.retrieval.chroma_store import ChromaVectorStore

            store = ChromaVectorStore()
        if llm is None:
            from pdf_chat.chat.llm import get_llm

            llm = get_llm()
        self.store = store
        self.llm = llm
        self.retriever = SemanticRetriever(store, default_k=retrieval_k)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        # Single writer: ingestion and retrieval never touch the index concurrently.
        self._index_lock = asyncio.Lock()

    # ── Ingest ─────────────────────────────────────────────────────────

    async def load_chunks(self, pdf_data_url: str) -> list[Document]:
        """Decode, parse, and split a PDF without touching the index."""
        return await asyncio.to_thread(self._load_chunks, pdf_data_url)

    def _load_chunks(self, pdf_data_url: str) -> list[Document]:
        pages = load_pdf_data_url(pdf_data_url)
        chunks = chunk_documents(pages, chunk_size=self.chunk_size, chunk_overlap=self.chunk_overlap)
        logger.info("Split %d page(s) into %d chunk(s)", len(pages), len(chunks))
        return chunks

    async def add_chunks(self, chunks: list[Document]) -> list[str]:
        """Embed and insert *chunks* into the index."""
        async with self._index_lock:
            return await asyncio.to_thread(self.store.add_documents, chunks)

    async def ingest_pdf(self, pdf_data_url: str) -> list[Document]:
        """Run the full ingest flow and return the indexed chunks.

        Raises
        ------
        ValueError
            When the payload is not a data URL.
        pypdf.errors.PdfReadError
            When the payload does not decode to a readable PDF.
        """
        chunks = await self.load_chunks(pdf_data_url)
        await self.add_chunks(chunks)
        return chunks

    async def document_count(self) -> int:
        return await asyncio.to_thread(self.store.count)

    async def health_check(self) -> bool:
        """Return ``True`` when the vector-store backend is reachable."""
        return await asyncio.to_thread(self.store.health_check)

    # ── Query ──────────────────────────────────────────────────────────

    async def retrieve_context(self, question: str, history: list[ChatMessage]) -> str:
        """Retrieve chunks for *question* and format them as the prompt context.

        With a non-empty *history* the question is first rewritten into a
        standalone question by the chat model.  Only the similarity search
        runs under the index lock.
        """
        query = await create_standalone_question_chain(self.llm, history).ainvoke(
            {"question": question, "chat_history": render_history(history)}
        )
        async with self._index_lock:
            docs = await self.retriever.as_langchain_retriever().ainvoke(query)
        return format_docs(docs)

    async def stream_answer(self, messages: list[ChatMessage]) -> AsyncIterator[str]:
        """Answer the last of *messages*, yielding non-empty fragments as generated."""
        question, history = split_conversation(messages)
        context = await self.retrieve_context(question, history)
        logger.info(
            "Retrieved context of %d chars for question (history: %d message(s))",
            len(context),
            len(history),
        )

        response_chain = create_response_chain(self.llm)
        async for chunk in response_chain.astream(
            {
                "question": question,
                "chat_history": to_langchain_messages(history),
                "context": context,
            }
        ):
            if chunk:
                yield chunk
