from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google.genai import types as gtypes

    from genmodel.transport.base import Transport
    from genmodel.types import (
        BatchEmbedContentsRequest,
        EmbedContentRequest,
        RequestOptions,
    )

logger = logging.getLogger(__name__)


async def embed_content(
    transport: Transport,
    model: str,
    request: EmbedContentRequest,
    request_options: RequestOptions,
) -> gtypes.EmbedContentResponse:
    """Embed a single content with *model*."""
    logger.debug("embed_content model=%s task_type=%s", model, request.task_type)
    return await transport.embed_content(model, request, request_options)


async def batch_embed_contents(
    transport: Transport,
    model: str,
    request: BatchEmbedContentsRequest,
    request_options: RequestOptions,
) -> gtypes.EmbedContentResponse:
    """Embed every content in *request* with *model* in one call."""
    logger.debug("batch_embed_contents model=%s size=%d", model, len(request.requests))
    return await transport.batch_embed_contents(model, request, request_options)
