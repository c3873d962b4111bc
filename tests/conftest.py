"""Shared test fixtures for the genmodel test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from google.genai import types as gtypes

from genmodel.client import GoogleGenerativeAI

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from genmodel.types import (
        BatchEmbedContentsRequest,
        EmbedContentRequest,
        GenerateContentRequest,
        RequestOptions,
    )

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_chunk(
    text: str = "Hello",
    finish_reason: str | None = None,
    index: int = 0,
) -> gtypes.GenerateContentResponse:
    """Create a single-candidate response carrying *text*."""
    return gtypes.GenerateContentResponse(
        candidates=[
            gtypes.Candidate(
                content=gtypes.Content(role="model", parts=[gtypes.Part(text=text)]),
                finish_reason=finish_reason,
                index=index,
            ),
        ],
    )


def make_blocked_response(
    block_reason: str = "SAFETY",
    message: str | None = None,
) -> gtypes.GenerateContentResponse:
    """Create a response whose prompt was blocked (no candidates)."""
    return gtypes.GenerateContentResponse(
        prompt_feedback=gtypes.GenerateContentResponsePromptFeedback(
            block_reason=block_reason,
            block_reason_message=message,
        ),
    )


class StreamBroken(Exception):
    """Error raised by :class:`FakeTransport` mid-stream."""


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------

class FakeTransport:
    """A transport that returns pre-configured responses and records calls.

    ``fail_after`` makes the chunk stream raise ``error`` after that many
    chunks have been yielded.
    """

    def __init__(
        self,
        chunks: list[gtypes.GenerateContentResponse] | None = None,
        response: gtypes.GenerateContentResponse | None = None,
        fail_after: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self._chunks = chunks if chunks is not None else [
            make_chunk("Hello"), make_chunk(" world"), make_chunk("!"),
        ]
        self._response = response or make_chunk("Hello world!")
        self._fail_after = fail_after
        self._error = error or StreamBroken("connection reset")
        self.calls: list[tuple[str, str, Any, RequestOptions]] = []
        self.pulled = 0

    @property
    def last_request(self) -> Any:
        return self.calls[-1][2]

    @property
    def last_options(self) -> RequestOptions:
        return self.calls[-1][3]

    async def generate_content(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.GenerateContentResponse:
        self.calls.append(("generate_content", model, request, request_options))
        return self._response

    async def generate_content_stream(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> AsyncIterator[gtypes.GenerateContentResponse]:
        self.calls.append(("generate_content_stream", model, request, request_options))
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[gtypes.GenerateContentResponse]:
        for i, chunk in enumerate(self._chunks):
            if self._fail_after is not None and i == self._fail_after:
                raise self._error
            self.pulled += 1
            yield chunk
        if self._fail_after is not None and self._fail_after >= len(self._chunks):
            raise self._error

    async def count_tokens(
        self,
        model: str,
        request: GenerateContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.CountTokensResponse:
        self.calls.append(("count_tokens", model, request, request_options))
        return gtypes.CountTokensResponse(total_tokens=7)

    async def embed_content(
        self,
        model: str,
        request: EmbedContentRequest,
        request_options: RequestOptions,
    ) -> gtypes.EmbedContentResponse:
        self.calls.append(("embed_content", model, request, request_options))
        return gtypes.EmbedContentResponse(
            embeddings=[gtypes.ContentEmbedding(values=[0.1, 0.2, 0.3])],
        )

    async def batch_embed_contents(
        self,
        model: str,
        request: BatchEmbedContentsRequest,
        request_options: RequestOptions,
    ) -> gtypes.EmbedContentResponse:
        self.calls.append(("batch_embed_contents", model, request, request_options))
        return gtypes.EmbedContentResponse(
            embeddings=[
                gtypes.ContentEmbedding(values=[float(i), 0.5])
                for i, _ in enumerate(request.requests)
            ],
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def transport() -> FakeTransport:
    """Provide a fake transport streaming "Hello", " world", "!"."""
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> GoogleGenerativeAI:
    """Provide a client wired to the fake transport."""
    return GoogleGenerativeAI(api_key="test-key", transport=transport)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "GOOGLE_API_KEY",
        "GEMINI_API_KEY",
        "GENMODEL_DEFAULT_MODEL",
        "GENMODEL_API_KEY",
        "GENMODEL_TIMEOUT",
        "GENMODEL_API_VERSION",
        "GENMODEL_BASE_URL",
        "GENMODEL_API_CLIENT",
        "GENMODEL_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
