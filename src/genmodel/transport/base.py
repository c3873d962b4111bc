"""Transport protocol definition.

The facade never calls the SDK directly; it goes through an object that
satisfies :class:`Transport`.  :class:`~genmodel.transport.genai.GenAITransport`
is the production implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from google.genai import types as gtypes

    from genmodel.types import (
        BatchEmbedContentsRequest,
        EmbedContentRequest,
        GenerateContentRequest,
        RequestOptions,
    )


@runtime_checkable
class Transport(Protocol):
    """Protocol that every transport must satisfy.

    Each method receives the fully qualified model name (``models/...`` or
    ``tunedModels/...``), a fully formed request, and the merged
    :class:`~genmodel.types.RequestOptions` for the call.
    """

    async def generate_content(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.GenerateContentResponse:
        """Issue a one-shot generation call."""
        ...

    async def generate_content_stream(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> AsyncIterator[gtypes.GenerateContentResponse]:
        """Open a streaming generation call.

        Returns once the stream is established.  The returned iterator yields
        each response chunk once, in arrival order, and raises if the call
        fails mid-stream.
        """
        ...

    async def count_tokens(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.CountTokensResponse:
        """Count the tokens of *request*."""
        ...

    async def embed_content(
        self,
        model: str,
        request: EmbedContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.EmbedContentResponse:
        """Embed a single content."""
        ...

    async def batch_embed_contents(
        self,
        model: str,
        request: BatchEmbedContentsRequest,
        request_options: RequestOptions,
    ) -> gtypes.EmbedContentResponse:
        """Embed several contents in one call."""
        ...
