from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google.genai import types as gtypes

    from genmodel.transport.base import Transport
    from genmodel.types import GenerateContentRequest, RequestOptions

logger = logging.getLogger(__name__)


async def count_tokens(
    transport: Transport,
    model: str,
    request: GenerateContentRequest,
    request_options: RequestOptions,
) -> gtypes.CountTokensResponse:
    """Count the tokens *request* would consume on *model*."""
    logger.debug("count_tokens model=%s contents=%d", model, len(request.contents))
    return await transport.count_tokens(model, request, request_options)
