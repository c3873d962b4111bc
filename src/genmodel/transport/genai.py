"""Transport backed by the ``google-genai`` SDK async client.

Converts facade requests into SDK calls on ``client.aio.models`` and maps
SDK API errors to :class:`~genmodel.errors.GoogleGenerativeAIFetchError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, AsyncIterator

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as gtypes

from genmodel.errors import (
    GoogleGenerativeAIFetchError,
    GoogleGenerativeAIRequestInputError,
)
from genmodel.requests.options import build_headers

if TYPE_CHECKING:
    from genmodel.types import (
        BatchEmbedContentsRequest,
        EmbedContentRequest,
        GenerateContentRequest,
        RequestOptions,
        Task,
    )

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_API_VERSION = "v1beta"


# ---------------------------------------------------------------------------
# Client creation
# ---------------------------------------------------------------------------


def _http_options(request_options: RequestOptions) -> gtypes.HttpOptions | None:
    """Translate request options into SDK ``HttpOptions`` (or ``None``)."""
    options: dict[str, Any] = {}
    if request_options.base_url:
        options["base_url"] = request_options.base_url
    if request_options.api_version:
        options["api_version"] = request_options.api_version
    if request_options.timeout is not None:
        options["timeout"] = request_options.timeout
    headers = build_headers(request_options)
    if headers:
        options["headers"] = headers
    return gtypes.HttpOptions(**options) if options else None


def _create_client(api_key: str, request_options: RequestOptions) -> genai.Client:
    """Instantiate a ``google.genai`` client for one call."""
    return genai.Client(
        api_key=api_key,
        http_options=_http_options(request_options),
    )


def _request_url(model: str, task: Task, request_options: RequestOptions) -> str:
    base_url = request_options.base_url or DEFAULT_BASE_URL
    api_version = request_options.api_version or DEFAULT_API_VERSION
    url = f"{base_url}/{api_version}/{model}:{task}"
    if task == "streamGenerateContent":
        url += "?alt=sse"
    return url


def _fetch_error(exc: genai_errors.APIError, url: str) -> GoogleGenerativeAIFetchError:
    details = getattr(exc, "details", None)
    return GoogleGenerativeAIFetchError(
        f"Error fetching from {url}: [{exc.code} {exc.status or ''}] {exc.message or ''}",
        status=exc.code,
        status_text=exc.status,
        error_details=[details] if details else None,
    )


# ---------------------------------------------------------------------------
# Request conversion
# ---------------------------------------------------------------------------


def _to_generate_config(request: GenerateContentRequest) -> gtypes.GenerateContentConfig:
    """Build the SDK config for a generation request."""
    values: dict[str, Any] = {}
    if request.generation_config is not None:
        target_fields = gtypes.GenerateContentConfig.model_fields
        for name in type(request.generation_config).model_fields:
            value = getattr(request.generation_config, name)
            if value is not None and name in target_fields:
                values[name] = value
    if request.safety_settings:
        values["safety_settings"] = request.safety_settings
    if request.tools:
        values["tools"] = request.tools
    if request.tool_config is not None:
        values["tool_config"] = request.tool_config
    if request.system_instruction is not None:
        values["system_instruction"] = request.system_instruction
    if request.cached_content:
        values["cached_content"] = request.cached_content
    return gtypes.GenerateContentConfig(**values)


def _to_embed_config(request: EmbedContentRequest) -> gtypes.EmbedContentConfig | None:
    values: dict[str, Any] = {}
    if request.task_type is not None:
        values["task_type"] = request.task_type
    if request.title is not None:
        values["title"] = request.title
    if request.output_dimensionality is not None:
        values["output_dimensionality"] = request.output_dimensionality
    return gtypes.EmbedContentConfig(**values) if values else None


# ---------------------------------------------------------------------------
# Transport class
# ---------------------------------------------------------------------------


class GenAITransport:
    """:class:`~genmodel.transport.base.Transport` over the ``google-genai`` SDK."""

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def generate_content(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.GenerateContentResponse:
        url = _request_url(model, "generateContent", request_options)
        logger.debug("POST %s", url)
        client = _create_client(self._api_key, request_options)
        try:
            return await client.aio.models.generate_content(
                model=model,
                contents=request.contents,
                config=_to_generate_config(request),
            )
        except genai_errors.APIError as exc:
            raise _fetch_error(exc, url) from exc

    async def generate_content_stream(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> AsyncIterator[gtypes.GenerateContentResponse]:
        url = _request_url(model, "streamGenerateContent", request_options)
        logger.debug("POST %s", url)
        client = _create_client(self._api_key, request_options)
        try:
            source = await client.aio.models.generate_content_stream(
                model=model,
                contents=request.contents,
                config=_to_generate_config(request),
            )
        except genai_errors.APIError as exc:
            raise _fetch_error(exc, url) from exc
        return _map_stream_errors(source, url)

    async def count_tokens(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.CountTokensResponse:
        url = _request_url(model, "countTokens", request_options)
        logger.debug("POST %s", url)
        client = _create_client(self._api_key, request_options)
        try:
            return await client.aio.models.count_tokens(
                model=model,
                contents=request.contents,
            )
        except genai_errors.APIError as exc:
            raise _fetch_error(exc, url) from exc

    async def embed_content(
        self,
        model: str,
        request: EmbedContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.EmbedContentResponse:
        url = _request_url(model, "embedContent", request_options)
        logger.debug("POST %s", url)
        client = _create_client(self._api_key, request_options)
        try:
            return await client.aio.models.embed_content(
                model=model,
                contents=request.content,
                config=_to_embed_config(request),
            )
        except genai_errors.APIError as exc:
            raise _fetch_error(exc, url) from exc

    async def batch_embed_contents(
        self,
        model: str,
        request: BatchEmbedContentsRequest,
        request_options: RequestOptions,
    ) -> gtypes.EmbedContentResponse:
        if not request.requests:
            raise GoogleGenerativeAIRequestInputError(
                "BatchEmbedContentsRequest must contain at least one request.",
            )
        configs = {
            (r.task_type, r.title, r.output_dimensionality) for r in request.requests
        }
        if len(configs) > 1:
            raise GoogleGenerativeAIRequestInputError(
                "All requests in a batch must share task_type, title and "
                "output_dimensionality.",
            )

        url = _request_url(model, "batchEmbedContents", request_options)
        logger.debug("POST %s (%d contents)", url, len(request.requests))
        client = _create_client(self._api_key, request_options)
        try:
            return await client.aio.models.embed_content(
                model=model,
                contents=[r.content for r in request.requests],
                config=_to_embed_config(request.requests[0]),
            )
        except genai_errors.APIError as exc:
            raise _fetch_error(exc, url) from exc


async def _map_stream_errors(
    source: AsyncIterator[gtypes.GenerateContentResponse],
    url: str,
) -> AsyncIterator[gtypes.GenerateContentResponse]:
    """Re-yield *source*, converting mid-stream SDK errors to fetch errors."""
    try:
        async for chunk in source:
            yield chunk
    except genai_errors.APIError as exc:
        raise _fetch_error(exc, url) from exc
