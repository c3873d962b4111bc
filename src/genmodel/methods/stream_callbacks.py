"""Attach ``on_data`` / ``on_done`` callbacks to a streamed generation result."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, AsyncIterable, AsyncIterator, Callable

if TYPE_CHECKING:
    import asyncio

    from genmodel.responses.response_helpers import EnhancedGenerateContentResponse
    from genmodel.types import GenerateContentStreamResult, StreamCallbacks


def apply_stream_callbacks(
    result: GenerateContentStreamResult,
    callbacks: StreamCallbacks | None,
) -> GenerateContentStreamResult:
    """Return *result* with *callbacks* wired in.

    * No callbacks: *result* is returned unchanged.
    * ``on_data`` given: ``stream`` is replaced by a lazy wrapper that calls
      ``on_data`` with each chunk's text before re-yielding the chunk, then
      calls ``on_done`` (if given) with the concatenated text once the
      stream is exhausted.  Nothing is pulled unless the caller iterates, so
      ``on_done`` never fires if the caller stops early.
    * Only ``on_done`` given: ``stream`` is left alone and ``on_done`` is
      called with the final response text once ``response`` resolves, whether
      or not the caller ever iterates ``stream``.

    In every case ``on_done`` is skipped if the stream fails.
    """
    if callbacks is None or (callbacks.on_data is None and callbacks.on_done is None):
        return result

    if callbacks.on_data is not None:
        return replace(
            result,
            stream=_observe_chunks(result.stream, callbacks.on_data, callbacks.on_done),
        )

    on_done = callbacks.on_done

    def _notify_done(future: asyncio.Future[EnhancedGenerateContentResponse]) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        on_done(future.result().text())  # type: ignore[misc]

    result.response.add_done_callback(_notify_done)
    return result


async def _observe_chunks(
    stream: AsyncIterable[EnhancedGenerateContentResponse],
    on_data: Callable[[str], None],
    on_done: Callable[[str], None] | None,
) -> AsyncIterator[EnhancedGenerateContentResponse]:
    full_text = ""
    async for chunk in stream:
        text = chunk.text()
        full_text += text
        on_data(text)
        yield chunk
    if on_done is not None:
        on_done(full_text)
