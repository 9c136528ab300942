"""FastAPI application exposing PDF ingestion and streamed question answering."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from pypdf.errors import PdfReadError

from pdf_chat.config import settings
from pdf_chat.worker.protocol import TERMINAL_EVENT_TYPES, IngestRequest, QueryRequest, event_to_dict
from pdf_chat.worker.runtime import OutboundEvent, Worker
from pdf_chat.worker.session import RAGSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the process-wide session once at startup."""
    logging.basicConfig(level=settings.log_level)
    app.state.session = RAGSession()
    yield


app = FastAPI(
    title="PDF Chat API",
    version="0.1.0",
    description="Upload a PDF, then ask questions answered from its content.",
    lifespan=lifespan,
)


def get_session(request: Request) -> RAGSession:
    return request.app.state.session


# ── Response schemas ──────────────────────────────────────────────────
class HealthResponse(BaseModel):
    """Vector-store health (``ok`` or ``degraded``) plus the number of indexed chunks."""

    status: str
    documents: int


class IngestResponse(BaseModel):
    """Number of chunks indexed from the uploaded PDF."""

    chunks: int


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health", response_model=HealthResponse)
async def health(session: RAGSession = Depends(get_session)) -> HealthResponse:
    """Report vector-store health and index size."""
    healthy = await session.health_check()
    return HealthResponse(
        status="ok" if healthy else "degraded",
        documents=await session.document_count(),
    )


@app.post("/ingest", response_model=IngestResponse)
async def ingest(body: IngestRequest, session: RAGSession = Depends(get_session)) -> IngestResponse:
    """Index a PDF sent as a data URL."""
    try:
        chunks = await session.ingest_pdf(body.pdf)
    except (ValueError, PdfReadError) as exc:
        logger.warning("Rejected PDF upload: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return IngestResponse(chunks=len(chunks))


@app.post("/query")
async def query(body: QueryRequest, session: RAGSession = Depends(get_session)) -> StreamingResponse:
    """Stream the answer as Server-Sent Events.

    SSE Format::

        event: chunk
        data: "<answer fragment>"

        event: complete
        data: "OK"

        event: error
        data: {"type": "...", "message": "..."}
    """

    async def event_generator() -> AsyncGenerator[str, None]:
        events: asyncio.Queue[OutboundEvent] = asyncio.Queue()
        worker = Worker(session, events.put, log_chunks=False)
        task = asyncio.create_task(worker.handle(body.model_dump()))
        try:
            while True:
                event = await events.get()
                if event.type == "log":
                    continue
                yield f"event: {event.type}\ndata: {json.dumps(event_to_dict(event)['data'])}\n\n"
                if event.type in TERMINAL_EVENT_TYPES:
                    break
        finally:
            await task

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
