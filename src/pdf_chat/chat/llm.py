"""LLM initialisation — single place to swap providers.

The model is served locally behind an OpenAI-compatible API (Ollama's
``/v1`` route, or a vLLM server), so ``ChatOpenAI`` works unchanged.
Point ``PDF_CHAT_LLM_BASE_URL`` elsewhere to use another server.
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI

from pdf_chat.config import settings

logger = logging.getLogger(__name__)


def get_llm(temperature: float = settings.llm_temperature) -> ChatOpenAI:
    """Return the configured chat model.

    A dummy API key (``"EMPTY"``) is used when none is configured because
    local servers don't require authentication but LangChain requires a
    non-empty value.
    """
    logger.info("Using chat model %s at %s", settings.llm_model_name, settings.llm_base_url)
    return ChatOpenAI(
        model=settings.llm_model_name,
        base_url=settings.llm_base_url,
        api_key=settings.llm_api_key or "EMPTY",
        temperature=temperature,
    )
