"""Multi-turn chat on top of the generation calls.

The session only appends successful turns to its history; it does not
validate, prune, or serialise concurrent sends.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from google.genai import types as gtypes

from genmodel.methods.generate_content import generate_content, generate_content_stream
from genmodel.requests.options import merge_request_options
from genmodel.requests.request_helpers import format_new_content
from genmodel.types import GenerateContentRequest, RequestOptions, StartChatParams

if TYPE_CHECKING:
    from genmodel.responses.response_helpers import EnhancedGenerateContentResponse
    from genmodel.transport.base import Transport
    from genmodel.types import (
        GenerateContentResult,
        GenerateContentStreamResult,
        RequestInput,
    )

logger = logging.getLogger(__name__)


class ChatSession:
    """A conversation with one model.

    Parameters
    ----------
    model:
        Fully qualified model name.
    params:
        Configuration snapshot taken from the model, merged with the
        caller's :class:`StartChatParams`.
    request_options:
        The model's default request options.
    transport:
        Transport used for every turn.
    """

    def __init__(
        self,
        model: str,
        params: StartChatParams | None,
        request_options: RequestOptions | None,
        transport: Transport,
    ) -> None:
        self.model = model
        self.params = params or StartChatParams()
        self._history: list[gtypes.Content] = list(self.params.history or [])
        self._request_options = request_options or RequestOptions()
        self._transport = transport

    def get_history(self) -> list[gtypes.Content]:
        """Return a copy of the conversation so far."""
        return list(self._history)

    async def send_message(
        self,
        request: RequestInput,
        request_options: RequestOptions | None = None,
    ) -> GenerateContentResult:
        """Send one user turn and wait for the full reply."""
        new_content = format_new_content(request)
        result = await generate_content(
            self._transport,
            self.model,
            self._build_request(new_content),
            merge_request_options(self._request_options, request_options),
        )
        self._record_turn(new_content, result.response)
        return result

    async def send_message_stream(
        self,
        request: RequestInput,
        request_options: RequestOptions | None = None,
    ) -> GenerateContentStreamResult:
        """Send one user turn and stream the reply.

        The turn is recorded before ``response`` resolves, so a follow-up
        send sees it once the caller has awaited ``response``.
        """
        new_content = format_new_content(request)
        result = await generate_content_stream(
            self._transport,
            self.model,
            self._build_request(new_content),
            merge_request_options(self._request_options, request_options),
        )

        async def _record_when_done() -> EnhancedGenerateContentResponse:
            response = await result.response
            self._record_turn(new_content, response)
            return response

        recorded = asyncio.get_running_loop().create_task(_record_when_done())
        recorded.add_done_callback(_log_failed_turn)
        return replace(result, response=recorded)

    def _build_request(self, new_content: gtypes.Content) -> GenerateContentRequest:
        return GenerateContentRequest(
            contents=[*self._history, new_content],
            generation_config=self.params.generation_config,
            safety_settings=self.params.safety_settings,
            tools=self.params.tools,
            tool_config=self.params.tool_config,
            system_instruction=self.params.system_instruction,
            cached_content=self.params.cached_content,
        )

    def _record_turn(
        self,
        new_content: gtypes.Content,
        response: EnhancedGenerateContentResponse,
    ) -> None:
        candidates = response.candidates
        if candidates and candidates[0].content is not None:
            reply = candidates[0].content
            self._history.append(new_content)
            self._history.append(
                gtypes.Content(role=reply.role or "model", parts=reply.parts or []),
            )
            return
        block_message = ""
        if response.prompt_feedback is not None:
            block_message = f" Prompt feedback: {response.prompt_feedback.block_reason}"
        logger.warning(
            "send_message() was unsuccessful; history left unchanged.%s",
            block_message,
        )


def _log_failed_turn(task: asyncio.Task[EnhancedGenerateContentResponse]) -> None:
    # Reading the exception marks it retrieved when nobody awaits the task.
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(
            "send_message_stream() failed; history left unchanged: %s", exc,
        )
