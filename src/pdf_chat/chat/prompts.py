"""Prompt templates for the PDF chat workflow.

Two prompts drive a query: one condenses a follow-up question and its
chat history into a standalone question for retrieval, the other answers
the question from the retrieved context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder, PromptTemplate

if TYPE_CHECKING:
    from langchain_core.documents import Document

FALLBACK_ANSWER = "Hmm, I'm not sure."

# ── 1. Standalone question ────────────────────────────────────────────

REPHRASE_QUESTION_TEMPLATE = """\
Given the following conversation and a follow up question, rephrase the follow up question to be a standalone question.

Chat History:
{chat_history}
Follow Up Input: {question}
Standalone Question:"""

REPHRASE_QUESTION_PROMPT = PromptTemplate.from_template(REPHRASE_QUESTION_TEMPLATE)

# ── 2. Grounded answer ────────────────────────────────────────────────

RESPONSE_SYSTEM_TEMPLATE = f"""\
You are an experienced researcher, expert at interpreting and answering questions based on provided sources. Using the provided context, answer the user's question to the best of your ability using the resources provided.
Generate a comprehensive and informative answer (but no more than 80 words) for a given question based solely on the provided search results (URL and content). You must only use information from the provided search results. Use an unbiased and journalistic tone. Combine search results together into a coherent answer. Do not repeat text.
If there is nothing in the context relevant to the question at hand, just say "{FALLBACK_ANSWER}" Don't try to make up an answer.
Anything between the following `context` html blocks is retrieved from a knowledge bank, not part of the conversation with the user.
<context>
    {{context}}
<context/>

REMEMBER: If there is no relevant information within the context, just say "{FALLBACK_ANSWER}" Don't try to make up an answer. Anything between the preceding 'context' html blocks is retrieved from a knowledge bank, not part of the conversation with the user."""

RESPONSE_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", RESPONSE_SYSTEM_TEMPLATE),
        MessagesPlaceholder("chat_history"),
        ("user", "{question}"),
    ]
)


# ── Helpers ────────────────────────────────────────────────────────────


def format_docs(documents: list[Document]) -> str:
    """Wrap each document in a numbered ``<doc>`` tag, one per line."""
    return "\n".join(
        f"<doc id='{i}'>{doc.page_content}</doc>" for i, doc in enumerate(documents)
    )
