"""Tests for genmodel.utils.response_stream."""

from __future__ import annotations

import asyncio

import pytest

from genmodel.utils.response_stream import ResponseStream


class TestIteration:
    async def test_yields_buffered_items_in_order(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.push(1)
        stream.push(2)
        stream.end("done")

        items = [item async for item in stream]
        assert items == [1, 2]

    async def test_waiting_consumer_receives_items(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()

        async def produce() -> None:
            for i in range(3):
                await asyncio.sleep(0)
                stream.push(i)
            stream.end("done")

        task = asyncio.create_task(produce())
        items = [item async for item in stream]
        await task
        assert items == [0, 1, 2]

    async def test_second_iteration_raises(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.end("done")
        async for _ in stream:
            pass
        with pytest.raises(RuntimeError, match="only be iterated once"):
            stream.__aiter__()

    async def test_push_after_end_is_ignored(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.push(1)
        stream.end("done")
        stream.push(2)
        assert [item async for item in stream] == [1]


class TestResult:
    async def test_result_resolves_without_iteration(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.push(1)
        stream.end("final")
        assert await stream.result() == "final"

    async def test_end_is_idempotent(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.end("first")
        stream.end("second")
        assert await stream.result() == "first"


class TestFailure:
    async def test_error_raised_after_buffered_items(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.push(1)
        stream.push(2)
        stream.fail(ValueError("boom"))

        seen: list[int] = []
        with pytest.raises(ValueError, match="boom"):
            async for item in stream:
                seen.append(item)
        assert seen == [1, 2]

    async def test_error_rejects_result(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()
        stream.fail(ValueError("boom"))
        with pytest.raises(ValueError, match="boom"):
            await stream.result()

    async def test_error_wakes_waiting_consumer(self) -> None:
        stream: ResponseStream[int, str] = ResponseStream()

        async def consume() -> list[int]:
            return [item async for item in stream]

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        stream.fail(ValueError("boom"))
        with pytest.raises(ValueError, match="boom"):
            await task
        with pytest.raises(ValueError):
            await stream.result()
