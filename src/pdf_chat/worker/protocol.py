"""Worker message protocol — tagged unions for inbound requests and outbound events.

Inbound::

    {"type": "ingest", "pdf": "data:application/pdf;base64,..."}
    {"type": "query",  "messages": [{"role": "human", "content": "..."}]}

Untagged payloads (``{"pdf": ...}`` / ``{"messages": [...]}``) are
accepted and tagged on parse.

Outbound::

    {"type": "log",      "data": <anything>}
    {"type": "chunk",    "data": "<answer fragment>"}
    {"type": "complete", "data": "OK"}
    {"type": "error",    "data": {"type": "<exception class>", "message": "..."}}
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from pdf_chat.chat.messages import ChatMessage

# ── Inbound ────────────────────────────────────────────────────────────


class IngestRequest(BaseModel):
    """Index a PDF delivered as a data URL."""

    type: Literal["ingest"] = "ingest"
    pdf: str


class QueryRequest(BaseModel):
    """Answer the last message of *messages*; earlier ones are history."""

    type: Literal["query"] = "query"
    messages: list[ChatMessage]

    @field_validator("messages")
    @classmethod
    def _require_question(cls, value: list[ChatMessage]) -> list[ChatMessage]:
        if not value:
            raise ValueError("messages must contain at least the question")
        return value


Request = Annotated[Union[IngestRequest, QueryRequest], Field(discriminator="type")]
_request_adapter: TypeAdapter[IngestRequest | QueryRequest] = TypeAdapter(Request)


def parse_request(payload: Any) -> IngestRequest | QueryRequest:
    """Validate an inbound payload, inferring ``type`` for untagged messages.

    Raises
    ------
    pydantic.ValidationError
        When the payload matches neither request shape.
    """
    if isinstance(payload, dict) and "type" not in payload:
        if payload.get("pdf"):
            payload = {**payload, "type": "ingest"}
        elif "messages" in payload:
            payload = {**payload, "type": "query"}
    return _request_adapter.validate_python(payload)


# ── Outbound ───────────────────────────────────────────────────────────


class LogEvent(BaseModel):
    """Diagnostic output with an arbitrary payload."""

    type: Literal["log"] = "log"
    data: Any = None


class ChunkEvent(BaseModel):
    """One streamed fragment of a generated answer."""

    type: Literal["chunk"] = "chunk"
    data: str


class CompleteEvent(BaseModel):
    """Terminal success signal."""

    type: Literal["complete"] = "complete"
    data: Literal["OK"] = "OK"


class ErrorInfo(BaseModel):
    type: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        return cls(type=type(exc).__name__, message=str(exc))


class ErrorEvent(BaseModel):
    """Terminal failure signal carrying a structured description."""

    type: Literal["error"] = "error"
    data: ErrorInfo


Event = Annotated[
    Union[LogEvent, ChunkEvent, CompleteEvent, ErrorEvent],
    Field(discriminator="type"),
]
event_adapter: TypeAdapter[LogEvent | ChunkEvent | CompleteEvent | ErrorEvent] = TypeAdapter(Event)

TERMINAL_EVENT_TYPES = frozenset({"complete", "error"})


def event_to_dict(event: LogEvent | ChunkEvent | CompleteEvent | ErrorEvent) -> dict[str, Any]:
    """JSON-safe dict for an outbound event."""
    return event.model_dump(mode="json")
