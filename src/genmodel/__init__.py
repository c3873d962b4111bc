"""Gemini generative model facade.

Exposes :class:`GoogleGenerativeAI` as the entry point and
:class:`GenerativeModel` for issuing requests against one configured model.
"""

from __future__ import annotations

__version__ = "0.1.0"

from genmodel.client import GoogleGenerativeAI
from genmodel.generative_model import GenerativeModel
from genmodel.types import (
    BatchEmbedContentsRequest,
    CachedContent,
    CountTokensRequest,
    EmbedContentRequest,
    GenerateContentRequest,
    GenerateContentResult,
    GenerateContentStreamResult,
    ModelParams,
    RequestOptions,
    StartChatParams,
    StreamCallbacks,
)

__all__ = [
    "BatchEmbedContentsRequest",
    "CachedContent",
    "CountTokensRequest",
    "EmbedContentRequest",
    "GenerateContentRequest",
    "GenerateContentResult",
    "GenerateContentStreamResult",
    "GenerativeModel",
    "GoogleGenerativeAI",
    "ModelParams",
    "RequestOptions",
    "StartChatParams",
    "StreamCallbacks",
    "__version__",
]
