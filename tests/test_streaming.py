"""
tests/test_streaming.py

SSE framing, meta/result/done ordering and consumer-disconnect handling.
"""

from __future__ import annotations

import json

import pytest

from app.config import CheckPipelineSettings
from app.indexing.orchestrator import CheckOrchestrator
from app.indexing.streaming import CheckStreamEmitter, EventChannel, format_sse
from app.indexing.types import CheckOptions, CheckStatus
from conftest import InMemoryCheckStorage, StubAutomation


def _emitter(storage: InMemoryCheckStorage, automation: StubAutomation | None = None) -> CheckStreamEmitter:
    orchestrator = CheckOrchestrator(
        storage=storage,
        automation=automation or StubAutomation(),  # type: ignore[arg-type]
        settings=CheckPipelineSettings(),
    )
    return CheckStreamEmitter(orchestrator)


def _parse(frame: str) -> dict:
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    return json.loads(frame[len("data: ") : -2])


async def _drain(channel: EventChannel) -> list[dict]:
    return [_parse(frame) async for frame in channel.frames()]


def test_format_sse() -> None:
    assert format_sse({"type": "done", "total": 2}) == 'data: {"type": "done", "total": 2}\n\n'


class TestCheckStreamEmitter:
    @pytest.mark.asyncio
    async def test_meta_results_done(self, storage: InMemoryCheckStorage) -> None:
        urls = ["https://a.test/1", "https://a.test/2", "https://a.test/3"]
        channel = _emitter(storage).start(urls, CheckOptions())

        events = await _drain(channel)

        assert events[0] == {"type": "meta", "total": 3}
        assert events[-1] == {"type": "done", "total": 3}
        results = events[1:-1]
        assert len(results) == 3
        assert {event["type"] for event in results} == {"result"}
        assert [event["completed"] for event in results] == [1, 2, 3]
        assert {event["status"] for event in results} == {CheckStatus.INDEXED}
        assert all(event["engine"] == "AutomationPrimary" for event in results)
        assert all("checked_at" in event for event in results)

    @pytest.mark.asyncio
    async def test_errors_do_not_end_stream_early(self, storage: InMemoryCheckStorage) -> None:
        automation = StubAutomation(
            primary=lambda url: CheckStatus.ERROR,
            secondary=lambda url: CheckStatus.ERROR if url.endswith("bad") else CheckStatus.NOT_INDEXED,
        )
        channel = _emitter(storage, automation).start(["https://a.test/bad", "https://a.test/ok"], CheckOptions())

        events = await _drain(channel)

        statuses = {event["url"]: event["status"] for event in events if event["type"] == "result"}
        assert statuses == {"https://a.test/bad": CheckStatus.ERROR, "https://a.test/ok": CheckStatus.NOT_INDEXED}
        assert events[-1]["type"] == "done"

    @pytest.mark.asyncio
    async def test_finish_hook_runs_before_done(self, storage: InMemoryCheckStorage) -> None:
        calls: list[str] = []

        async def on_finished() -> None:
            calls.append("finished")

        channel = _emitter(storage).start(["https://a.test/1"], CheckOptions(), on_finished=on_finished)
        events = await _drain(channel)

        assert calls == ["finished"]
        assert events[-1]["type"] == "done"

    @pytest.mark.asyncio
    async def test_failing_finish_hook_still_sends_done(self, storage: InMemoryCheckStorage) -> None:
        async def on_finished() -> None:
            raise RuntimeError("usage store down")

        channel = _emitter(storage).start(["https://a.test/1"], CheckOptions(), on_finished=on_finished)
        events = await _drain(channel)

        assert events[-1] == {"type": "done", "total": 1}

    @pytest.mark.asyncio
    async def test_disconnected_consumer_does_not_stop_batch(self, storage: InMemoryCheckStorage) -> None:
        urls = ["https://a.test/1", "https://a.test/2", "https://a.test/3"]
        emitter = _emitter(storage, StubAutomation(delay=0.01))
        channel = EventChannel()
        frames = channel.frames()

        channel.send({"type": "ping"})
        assert _parse(await frames.__anext__()) == {"type": "ping"}
        await frames.aclose()
        assert channel.consumer_gone

        await emitter.pump(channel, urls, CheckOptions())

        assert sorted(entry.url for entry in storage.scans) == sorted(urls)
