"""Runnable chains for question rewriting and answer generation."""

from __future__ import annotations

from operator import itemgetter
from typing import TYPE_CHECKING

from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import RunnableLambda

from pdf_chat.chat.prompts import REPHRASE_QUESTION_PROMPT, RESPONSE_PROMPT

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from langchain_core.runnables import Runnable

    from pdf_chat.chat.messages import ChatMessage


def create_standalone_question_chain(
    llm: BaseChatModel,
    chat_history: list[ChatMessage],
) -> Runnable:
    """Build the chain that turns ``{"question", "chat_history"}`` into the search query.

    With history, *llm* rewrites the follow-up into a standalone question.
    Without history the raw question is passed through and *llm* is not called.
    """
    if chat_history:
        return REPHRASE_QUESTION_PROMPT | llm | StrOutputParser()
    return RunnableLambda(itemgetter("question"))


def create_response_chain(llm: BaseChatModel) -> Runnable:
    """Build the chain that answers ``{"context", "chat_history", "question"}`` as text."""
    return RESPONSE_PROMPT | llm | StrOutputParser()
