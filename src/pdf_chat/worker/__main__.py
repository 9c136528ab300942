"""JSON-lines worker over stdio.

Run with ``python -m pdf_chat.worker``.  Each stdin line is one inbound
message; each stdout line is one outbound event.  Logs go to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from pdf_chat.config import settings
from pdf_chat.worker.protocol import ErrorEvent, ErrorInfo, event_to_dict
from pdf_chat.worker.runtime import OutboundEvent, Worker
from pdf_chat.worker.session import RAGSession

logger = logging.getLogger(__name__)


def _write_event(event: OutboundEvent) -> None:
    sys.stdout.write(json.dumps(event_to_dict(event)) + "\n")
    sys.stdout.flush()


async def serve_stdio(worker: Worker) -> None:
    """Feed stdin lines to *worker* until EOF."""
    while True:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring malformed input line: %s", exc)
            await worker.send(ErrorEvent(data=ErrorInfo.from_exception(exc)))
            continue
        await worker.handle(payload)


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    worker = Worker(RAGSession(), _write_event)
    logger.info("Worker ready; reading messages from stdin")
    asyncio.run(serve_stdio(worker))


if __name__ == "__main__":
    main()
