"""Worker runtime — serial message handling and event relay.

The :class:`Worker` turns inbound protocol messages into calls on a
:class:`~pdf_chat.worker.session.RAGSession` and relays the results as
outbound events through an ``emit`` callback.  Messages are handled one
at a time; every message ends with exactly one ``complete`` or ``error``
event.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Union

from pdf_chat.config import settings
from pdf_chat.worker.protocol import (
    ChunkEvent,
    CompleteEvent,
    ErrorEvent,
    ErrorInfo,
    IngestRequest,
    LogEvent,
    QueryRequest,
    parse_request,
)

if TYPE_CHECKING:
    from langchain_core.documents import Document

    from pdf_chat.worker.session import RAGSession

logger = logging.getLogger(__name__)

OutboundEvent = Union[LogEvent, ChunkEvent, CompleteEvent, ErrorEvent]
Emit = Callable[[OutboundEvent], Union[Awaitable[None], None]]

_RECEIVED_PREVIEW_CHARS = 500
_STOP = object()


def _describe_payload(payload: Any) -> str:
    text = json.dumps(payload, default=str)
    if len(text) > _RECEIVED_PREVIEW_CHARS:
        text = f"{text[:_RECEIVED_PREVIEW_CHARS]}… ({len(text)} chars)"
    return f"Received: {text}"


def _chunk_summary(chunks: list[Document]) -> list[dict[str, Any]]:
    return [{"page_content": c.page_content, "metadata": c.metadata} for c in chunks]


class Worker:
    """Serial handler for inbound worker messages.

    Parameters
    ----------
    session:
        The RAG session both flows run against.
    emit:
        Called with every outbound event; may be a plain function or a
        coroutine function.
    log_chunks:
        Emit the chunk list as a ``log`` event before indexing.
    """

    def __init__(self, session: RAGSession, emit: Emit, *, log_chunks: bool = settings.log_chunks) -> None:
        self.session = session
        self._emit = emit
        self.log_chunks = log_chunks
        self._queue: asyncio.Queue[Any] = asyncio.Queue()

    async def send(self, event: OutboundEvent) -> None:
        result = self._emit(event)
        if inspect.isawaitable(result):
            await result

    # ── Single message ─────────────────────────────────────────────────

    async def handle(self, payload: Any) -> None:
        """Run one inbound message to completion.

        Failures of either flow are reported as a single ``error`` event
        and do not propagate.
        """
        await self.send(LogEvent(data=_describe_payload(payload)))
        try:
            request = parse_request(payload)
            if isinstance(request, IngestRequest):
                await self._ingest(request)
            elif isinstance(request, QueryRequest):
                await self._query(request)
            else:
                raise TypeError(f"Unhandled request type: {type(request).__name__}")
        except Exception as exc:
            logger.exception("Message handling failed")
            await self.send(ErrorEvent(data=ErrorInfo.from_exception(exc)))
            return
        await self.send(CompleteEvent())

    async def _ingest(self, request: IngestRequest) -> None:
        chunks = await self.session.load_chunks(request.pdf)
        if self.log_chunks:
            await self.send(LogEvent(data=_chunk_summary(chunks)))
        await self.session.add_chunks(chunks)

    async def _query(self, request: QueryRequest) -> None:
        async for chunk in self.session.stream_answer(request.messages):
            await self.send(ChunkEvent(data=chunk))

    # ── Queue ──────────────────────────────────────────────────────────

    def submit(self, payload: Any) -> None:
        """Queue *payload* for :meth:`run`."""
        self._queue.put_nowait(payload)

    def stop(self) -> None:
        """Ask :meth:`run` to return once the messages queued so far are handled."""
        self._queue.put_nowait(_STOP)

    async def run(self) -> None:
        """Handle queued messages one at a time until :meth:`stop` is called."""
        while True:
            payload = await self._queue.get()
            try:
                if payload is _STOP:
                    return
                await self.handle(payload)
            finally:
                self._queue.task_done()
