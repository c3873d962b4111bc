"""Facade over one configured generative model.

Holds the persistent configuration (model name, generation config, safety
settings, tools, tool config, system instruction, cached content, default
request options) and exposes the public operations.  Each call builds a
fresh request from that configuration plus the caller's overrides.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from genmodel.methods.chat_session import ChatSession
from genmodel.methods.count_tokens import count_tokens
from genmodel.methods.embed_content import batch_embed_contents, embed_content
from genmodel.methods.generate_content import generate_content, generate_content_stream
from genmodel.methods.stream_callbacks import apply_stream_callbacks
from genmodel.requests.options import merge_request_options
from genmodel.requests.request_helpers import (
    format_count_tokens_input,
    format_embed_content_input,
    format_generate_content_input,
    format_system_instruction,
    merge_request,
)
from genmodel.transport.genai import GenAITransport
from genmodel.types import GenerateContentRequest, RequestOptions, StartChatParams

if TYPE_CHECKING:
    from google.genai import types as gtypes

    from genmodel.transport.base import Transport
    from genmodel.types import (
        BatchEmbedContentsRequest,
        CountTokensRequest,
        EmbedContentRequest,
        GenerateContentResult,
        GenerateContentStreamResult,
        ModelParams,
        RequestInput,
        StreamCallbacks,
    )

logger = logging.getLogger(__name__)


def _qualify_model_name(model: str) -> str:
    """Prefix bare model names with ``models/``.

    Names that already carry a resource prefix (``models/...``,
    ``tunedModels/...``) are kept as-is.
    """
    if "/" in model:
        return model
    return f"models/{model}"


class GenerativeModel:
    """Generative model APIs for one model configuration.

    Public attributes may be changed between calls; each call reads them
    once when it builds its request.

    Parameters
    ----------
    api_key:
        API key for the service.
    model_params:
        Persistent model configuration.
    request_options:
        Default request options.  Options passed to an individual call take
        precedence field by field.
    transport:
        Transport override.  Defaults to :class:`GenAITransport`.
    """

    def __init__(
        self,
        api_key: str,
        model_params: ModelParams,
        request_options: RequestOptions | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = _qualify_model_name(model_params.model)
        self.generation_config: gtypes.GenerationConfig | None = model_params.generation_config
        self.safety_settings: list[gtypes.SafetySetting] = list(model_params.safety_settings or [])
        self.tools = model_params.tools
        self.tool_config = model_params.tool_config
        self.system_instruction = format_system_instruction(model_params.system_instruction)
        self.cached_content = model_params.cached_content
        self._request_options = request_options or RequestOptions()
        self._transport: Transport = transport or GenAITransport(api_key)

    @property
    def request_options(self) -> RequestOptions:
        """The default request options."""
        return self._request_options

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def _base_request(self) -> GenerateContentRequest:
        """Snapshot the persistent configuration as a request with no contents."""
        return GenerateContentRequest(
            contents=[],
            generation_config=self.generation_config,
            safety_settings=self.safety_settings,
            tools=self.tools,
            tool_config=self.tool_config,
            system_instruction=self.system_instruction,
            cached_content=self.cached_content.name if self.cached_content else None,
        )

    def _call_options(self, request_options: RequestOptions | None) -> RequestOptions:
        return merge_request_options(self._request_options, request_options)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_content(
        self,
        request: GenerateContentRequest | RequestInput,
        request_options: RequestOptions | None = None,
    ) -> GenerateContentResult:
        """Make a single non-streaming call to the model.

        Fields set in *request_options* take precedence over the model's
        default request options.
        """
        params = merge_request(self._base_request(), format_generate_content_input(request))
        logger.debug("generate_content model=%s", self.model)
        return await generate_content(
            self._transport, self.model, params, self._call_options(request_options),
        )

    async def generate_content_stream(
        self,
        request: GenerateContentRequest | RequestInput,
        request_options: RequestOptions | None = None,
        stream_callbacks: StreamCallbacks | None = None,
    ) -> GenerateContentStreamResult:
        """Make a single streaming call to the model.

        Returns as soon as the stream is established.  The result holds an
        async iterable over every chunk and a future for the aggregated
        response.

        *stream_callbacks* can receive text without iterating by hand:

        * ``on_data`` is called with each chunk's text as the caller iterates
          ``stream``.  With ``on_data`` present, ``on_done`` is called with
          the full text when that iteration reaches the end; if the caller
          stops early it is never called.
        * ``on_done`` alone is called with the full text when ``response``
          resolves, even if ``stream`` is never iterated.
        """
        params = merge_request(self._base_request(), format_generate_content_input(request))
        logger.debug("generate_content_stream model=%s", self.model)
        result = await generate_content_stream(
            self._transport, self.model, params, self._call_options(request_options),
        )
        return apply_stream_callbacks(result, stream_callbacks)

    def start_chat(self, start_chat_params: StartChatParams | None = None) -> ChatSession:
        """Start a multi-turn :class:`ChatSession` with this model's configuration."""
        base = self._base_request()
        snapshot = StartChatParams(
            generation_config=base.generation_config,
            safety_settings=base.safety_settings,
            tools=base.tools,
            tool_config=base.tool_config,
            system_instruction=base.system_instruction,
            cached_content=base.cached_content,
        )
        if start_chat_params is not None:
            snapshot = merge_request(snapshot, start_chat_params)
            snapshot = replace(
                snapshot,
                system_instruction=format_system_instruction(snapshot.system_instruction),
            )
        return ChatSession(self.model, snapshot, self._request_options, self._transport)

    async def count_tokens(
        self,
        request: CountTokensRequest | RequestInput,
        request_options: RequestOptions | None = None,
    ) -> gtypes.CountTokensResponse:
        """Count the tokens in *request* under this model's configuration."""
        params = format_count_tokens_input(request, self._base_request())
        return await count_tokens(
            self._transport, self.model, params, self._call_options(request_options),
        )

    async def embed_content(
        self,
        request: EmbedContentRequest | RequestInput,
        request_options: RequestOptions | None = None,
    ) -> gtypes.EmbedContentResponse:
        """Embed the provided content."""
        return await embed_content(
            self._transport,
            self.model,
            format_embed_content_input(request),
            self._call_options(request_options),
        )

    async def batch_embed_contents(
        self,
        request: BatchEmbedContentsRequest,
        request_options: RequestOptions | None = None,
    ) -> gtypes.EmbedContentResponse:
        """Embed every :class:`EmbedContentRequest` in *request* in one call."""
        return await batch_embed_contents(
            self._transport, self.model, request, self._call_options(request_options),
        )
