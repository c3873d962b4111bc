"""Core type definitions for the generative model facade.

Wire-level values (``Content``, ``Part``, ``GenerationConfig``, ...) are the
``google-genai`` SDK models.  Everything the facade adds on top of them is a
frozen dataclass (immutable).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterable, Callable, Literal, Union

from google.genai import types as gtypes

if TYPE_CHECKING:
    from genmodel.responses.response_helpers import EnhancedGenerateContentResponse


# ---------------------------------------------------------------------------
# Literal type aliases
# ---------------------------------------------------------------------------

Task = Literal[
    "generateContent",
    "streamGenerateContent",
    "countTokens",
    "embedContent",
    "batchEmbedContents",
]

TaskType = Literal[
    "TASK_TYPE_UNSPECIFIED",
    "RETRIEVAL_QUERY",
    "RETRIEVAL_DOCUMENT",
    "SEMANTIC_SIMILARITY",
    "CLASSIFICATION",
    "CLUSTERING",
]


# ---------------------------------------------------------------------------
# Request options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequestOptions:
    """Transport-level options.

    Instance-level defaults are given to the model; per-call values override
    them field by field (see :func:`genmodel.requests.options.merge_request_options`).
    """

    timeout: int | None = None
    """Request timeout in milliseconds."""
    api_version: str | None = None
    base_url: str | None = None
    custom_headers: dict[str, str] | None = None
    api_client: str | None = None
    """Value prepended to the ``x-goog-api-client`` header."""


# ---------------------------------------------------------------------------
# Model configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CachedContent:
    """Reference to server-side cached content."""

    name: str | None = None
    model: str | None = None
    display_name: str | None = None
    system_instruction: gtypes.Content | None = None
    tools: list[gtypes.Tool] | None = None
    tool_config: gtypes.ToolConfig | None = None
    contents: list[gtypes.Content] | None = None
    ttl_seconds: int | None = None


SystemInstructionInput = Union[str, gtypes.Part, gtypes.Content]
"""Accepted shapes for a system instruction."""


@dataclass(frozen=True)
class ModelParams:
    """Persistent configuration for a :class:`~genmodel.generative_model.GenerativeModel`."""

    model: str
    generation_config: gtypes.GenerationConfig | None = None
    safety_settings: list[gtypes.SafetySetting] | None = None
    tools: list[gtypes.Tool] | None = None
    tool_config: gtypes.ToolConfig | None = None
    system_instruction: SystemInstructionInput | None = None
    cached_content: CachedContent | None = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateContentRequest:
    """A complete generation request.

    Built fresh per call from the model configuration and caller overrides.
    ``cached_content`` is the cached-content resource name.
    """

    contents: list[gtypes.Content]
    generation_config: gtypes.GenerationConfig | None = None
    safety_settings: list[gtypes.SafetySetting] | None = None
    tools: list[gtypes.Tool] | None = None
    tool_config: gtypes.ToolConfig | None = None
    system_instruction: gtypes.Content | None = None
    cached_content: str | None = None


@dataclass(frozen=True)
class StartChatParams:
    """Parameters for :meth:`GenerativeModel.start_chat`."""

    history: list[gtypes.Content] | None = None
    generation_config: gtypes.GenerationConfig | None = None
    safety_settings: list[gtypes.SafetySetting] | None = None
    tools: list[gtypes.Tool] | None = None
    tool_config: gtypes.ToolConfig | None = None
    system_instruction: gtypes.Content | None = None
    cached_content: str | None = None


@dataclass(frozen=True)
class CountTokensRequest:
    """Token-count request: either raw ``contents`` or a full generation request."""

    contents: list[gtypes.Content] | None = None
    generate_content_request: GenerateContentRequest | None = None


@dataclass(frozen=True)
class EmbedContentRequest:
    """A single embedding request."""

    content: gtypes.Content
    task_type: TaskType | None = None
    title: str | None = None
    output_dimensionality: int | None = None


@dataclass(frozen=True)
class BatchEmbedContentsRequest:
    """A batch of embedding requests sent in one call."""

    requests: list[EmbedContentRequest]


PartInput = Union[str, gtypes.Part]

RequestInput = Union[str, gtypes.Part, list[PartInput]]
"""Shorthand request shapes accepted in place of a request dataclass."""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateContentResult:
    """Result of a one-shot generation call."""

    response: EnhancedGenerateContentResponse


@dataclass(frozen=True)
class GenerateContentStreamResult:
    """Result of a streaming generation call.

    ``stream`` yields each chunk once, in arrival order.  ``response``
    resolves to the aggregated final response once the stream is complete,
    whether or not ``stream`` is ever iterated.
    """

    stream: AsyncIterable[EnhancedGenerateContentResponse]
    response: asyncio.Future[EnhancedGenerateContentResponse]


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StreamCallbacks:
    """Optional per-call callbacks for :meth:`GenerativeModel.generate_content_stream`.

    ``on_data`` receives the text increment of each chunk.  ``on_done``
    receives the full text once the stream completes.
    """

    on_data: Callable[[str], None] | None = None
    on_done: Callable[[str], None] | None = None
