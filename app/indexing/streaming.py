"""
Server-sent-event emission for check batches.

The orchestrator runs in its own task and pushes events into a channel; the
HTTP response drains the channel. A consumer that disconnects only turns
further sends into no-ops, the batch still runs to completion.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any

from app.indexing.logging_utils import log_event
from app.indexing.orchestrator import CheckOrchestrator
from app.indexing.types import CheckOptions, CheckProgress

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

_END = object()
_running_batches: set[asyncio.Task] = set()


def format_sse(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, default=str)}\n\n"


def meta_event(total: int) -> dict[str, Any]:
    return {"type": "meta", "total": total}


def result_event(progress: CheckProgress) -> dict[str, Any]:
    outcome = progress.outcome
    return {
        "type": "result",
        "url": outcome.url,
        "status": outcome.status,
        "engine": outcome.engine,
        "checked_at": outcome.checked_at.isoformat(),
        "completed": progress.completed,
        "total": progress.total,
    }


def done_event(total: int) -> dict[str, Any]:
    return {"type": "done", "total": total}


class EventChannel:
    """
    Single-consumer queue of formatted SSE frames.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._consumer_gone = False
        self._finished = False

    @property
    def consumer_gone(self) -> bool:
        return self._consumer_gone

    def send(self, payload: dict[str, Any]) -> None:
        if self._consumer_gone or self._finished:
            return
        self._queue.put_nowait(format_sse(payload))

    def finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._queue.put_nowait(_END)

    async def frames(self) -> AsyncIterator[str]:
        try:
            while True:
                item = await self._queue.get()
                if item is _END:
                    return
                yield item
        finally:
            if not self._finished:
                self._consumer_gone = True
                log_event(logger, logging.INFO, "stream_consumer_disconnected")


class CheckStreamEmitter:
    """
    Drives an orchestrator run and mirrors it onto an EventChannel.
    """

    def __init__(self, orchestrator: CheckOrchestrator) -> None:
        self._orchestrator = orchestrator

    def start(
        self,
        urls: Sequence[str],
        options: CheckOptions,
        *,
        on_finished: Callable[[], Awaitable[None]] | None = None,
    ) -> EventChannel:
        """
        Launch the batch in the background and return its event channel.

        Must be called from within a running event loop.
        """

        channel = EventChannel()
        task = asyncio.create_task(self.pump(channel, list(urls), options, on_finished=on_finished))
        _running_batches.add(task)
        task.add_done_callback(_running_batches.discard)
        return channel

    async def pump(
        self,
        channel: EventChannel,
        urls: Sequence[str],
        options: CheckOptions,
        *,
        on_finished: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        total = len(urls)
        channel.send(meta_event(total))
        try:
            async for progress in self._orchestrator.run(urls, options):
                channel.send(result_event(progress))

            if on_finished is not None:
                try:
                    await on_finished()
                except Exception as exc:
                    log_event(logger, logging.WARNING, "batch_finish_hook_failed", error=str(exc))

            channel.send(done_event(total))
        except Exception as exc:
            log_event(logger, logging.ERROR, "check_stream_failed", total=total, error=str(exc), exc_info=True)
        finally:
            channel.finish()
