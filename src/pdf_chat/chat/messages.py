"""Chat message model and conversions to LangChain message types."""

from __future__ import annotations

from typing import Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, ConfigDict

Role = Literal["human", "ai"]


class ChatMessage(BaseModel):
    """One turn of a conversation, as sent by the caller."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_langchain(self) -> BaseMessage:
        if self.role == "human":
            return HumanMessage(content=self.content)
        return AIMessage(content=self.content)


def split_conversation(messages: list[ChatMessage]) -> tuple[str, list[ChatMessage]]:
    """Return ``(question, history)``: the last message's text and everything before it."""
    if not messages:
        raise ValueError("A query needs at least one message")
    return messages[-1].content, list(messages[:-1])


def render_history(history: list[ChatMessage]) -> str:
    """Render *history* as ``role: content`` lines for the rephrasing prompt."""
    return "\n".join(f"{message.role}: {message.content}" for message in history)


def to_langchain_messages(history: list[ChatMessage]) -> list[BaseMessage]:
    return [message.to_langchain() for message in history]
