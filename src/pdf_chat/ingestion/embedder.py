"""Embedding model construction."""

from __future__ import annotations

import logging

from langchain_huggingface import HuggingFaceEmbeddings

from pdf_chat.config import settings

logger = logging.getLogger(__name__)


def get_embedding_function(model_name: str = settings.embedding_model) -> HuggingFaceEmbeddings:
    """Return the configured sentence-transformer embedding function."""
    logger.info("Loading embedding model %s", model_name)
    return HuggingFaceEmbeddings(model_name=model_name)
