"""In-memory Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import chromadb

from pdf_chat.config import settings
from pdf_chat.retrieval.base import VectorStoreBase

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

_METADATA_FIELD = "metadata_json"


def _encode_metadata(metadata: dict[str, Any], chunk_index: int) -> dict[str, Any]:
    """Pack document metadata into the flat scalar mapping Chroma accepts.

    The full nested metadata travels as one JSON string so arbitrary keys
    (including dotted PDF info keys such as ``PTEX.Fullbanner``) survive
    unchanged; ``chunk_index`` stays a plain field.
    """
    return {
        _METADATA_FIELD: json.dumps(metadata, default=str),
        "chunk_index": chunk_index,
    }


def _decode_metadata(stored: dict[str, Any]) -> dict[str, Any]:
    """Inverse of :func:`_encode_metadata`."""
    metadata = json.loads(stored.get(_METADATA_FIELD) or "{}")
    if "chunk_index" in stored:
        metadata["chunk_index"] = stored["chunk_index"]
    return metadata


def default_collection_name() -> str:
    """Unique collection name so sessions sharing a Chroma process stay isolated."""
    return f"{settings.collection_prefix}-{uuid4().hex[:12]}"


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed, process-local vector store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.  Defaults to a fresh unique name.
    embedding:
        LangChain embedding model used for documents and queries.  When
        *None*, the configured HuggingFace sentence-transformer is loaded.
    client:
        Chroma client.  Defaults to an in-memory ``EphemeralClient``.
    """

    def __init__(
        self,
        collection_name: str | None = None,
        *,
        embedding: Embeddings | None = None,
        client: Any | None = None,
    ) -> None:
        super().__init__(collection_name or default_collection_name())
        if embedding is None:
            from pdf_chat.ingestion.embedder import get_embedding_function

            embedding = get_embedding_function()
        self._embedder = embedding
        self._client = client or chromadb.EphemeralClient()
        self._collection = self._client.get_or_create_collection(
            self.collection_name,
            embedding_function=None,
            metadata={"hnsw:space": "cosine"},
        )

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: list[Document]) -> list[str]:
        if not documents:
            return []

        offset = self._collection.count()
        ids = [uuid4().hex for _ in documents]
        texts = [doc.page_content for doc in documents]
        metadatas = [
            _encode_metadata(doc.metadata, offset + i)
            for i, doc in enumerate(documents)
        ]
        embeddings = self._embedder.embed_documents(texts)

        self._collection.add(ids=ids, embeddings=embeddings, documents=texts, metadatas=metadatas)
        logger.info("Indexed %d chunk(s) into %s", len(ids), self.collection_name)
        return ids

    def similarity_search(
        self,
        query_embedding: list[float],
        *,
        k: int = 4,
    ) -> list[dict[str, Any]]:
        available = self._collection.count()
        if available == 0:
            return []

        results = self._collection.query(
            query_embeddings=[query_embedding],
            n_results=min(k, available),
            include=["documents", "metadatas", "distances"],
        )

        hits: list[dict[str, Any]] = []
        ids = results.get("ids", [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            # Cosine distance → similarity.
            hits.append(
                {
                    "id": doc_id,
                    "content": content or "",
                    "score": 1.0 - dist,
                    "metadata": _decode_metadata(dict(meta or {})),
                }
            )
        return hits

    def similarity_search_by_text(self, query: str, *, k: int = 4) -> list[dict[str, Any]]:
        embedding = self._embedder.embed_query(query)
        return self.similarity_search(embedding, k=k)

    def count(self) -> int:
        return self._collection.count()

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
