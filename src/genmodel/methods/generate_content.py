"""One-shot and streamed generation calls.

A streamed call returns as soon as the transport has established the
stream.  A background task then drains the chunk source exactly once,
feeding every chunk to the caller-facing stream and the aggregate to the
final-response future.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from genmodel.responses.aggregate import aggregate_responses
from genmodel.responses.response_helpers import (
    EnhancedGenerateContentResponse,
    add_helpers,
)
from genmodel.types import GenerateContentResult, GenerateContentStreamResult
from genmodel.utils.response_stream import ResponseStream

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from google.genai import types as gtypes

    from genmodel.transport.base import Transport
    from genmodel.types import GenerateContentRequest, RequestOptions

logger = logging.getLogger(__name__)

# Strong references to running drain tasks; the loop only keeps weak ones.
_background_tasks: set[asyncio.Task[None]] = set()


async def generate_content(
    transport: Transport,
    model: str,
    request: GenerateContentRequest,
    request_options: RequestOptions,
) -> GenerateContentResult:
    """Issue a one-shot generation call and wrap its response."""
    response = await transport.generate_content(model, request, request_options)
    return GenerateContentResult(response=add_helpers(response))


async def generate_content_stream(
    transport: Transport,
    model: str,
    request: GenerateContentRequest,
    request_options: RequestOptions,
) -> GenerateContentStreamResult:
    """Open a streamed generation call.

    Returns
    -------
    GenerateContentStreamResult
        ``stream`` yields each chunk once, in arrival order; ``response``
        resolves to the aggregate of all chunks, or fails with the error
        that ended the stream.
    """
    source = await transport.generate_content_stream(model, request, request_options)
    return process_stream(source)


def process_stream(
    source: AsyncIterator[gtypes.GenerateContentResponse],
) -> GenerateContentStreamResult:
    """Spawn a background task that drains *source* into a stream and an aggregate.

    Must be called from within a running event loop.
    """
    stream: ResponseStream[EnhancedGenerateContentResponse, EnhancedGenerateContentResponse]
    stream = ResponseStream()

    async def _drain() -> None:
        responses: list[gtypes.GenerateContentResponse] = []
        try:
            async for response in source:
                responses.append(response)
                stream.push(add_helpers(response))
        except Exception as exc:
            logger.debug("stream failed after %d chunks: %s", len(responses), exc)
            stream.fail(exc)
            return
        logger.debug("stream complete after %d chunks", len(responses))
        stream.end(add_helpers(aggregate_responses(responses)))

    task = asyncio.get_running_loop().create_task(_drain())
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    return GenerateContentStreamResult(stream=stream, response=stream.result())
