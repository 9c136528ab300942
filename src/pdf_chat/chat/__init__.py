"""
Chat — prompts, chat model, and the runnable chains of a query.

Public API
----------
- :class:`ChatMessage` — one conversation turn (``human`` or ``ai``).
- :func:`create_standalone_question_chain` — question (+ history) → search query.
- :func:`format_docs` — retrieved documents → ``<doc id>`` context string.
- :func:`create_response_chain` — context + history + question → streamed text.
"""

from pdf_chat.chat.chains import create_response_chain, create_standalone_question_chain
from pdf_chat.chat.messages import ChatMessage
from pdf_chat.chat.prompts import FALLBACK_ANSWER, format_docs

__all__ = [
    "FALLBACK_ANSWER",
    "ChatMessage",
    "create_response_chain",
    "create_standalone_question_chain",
    "format_docs",
]
