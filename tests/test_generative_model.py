"""Tests for genmodel.generative_model."""

from __future__ import annotations

from google.genai import types as gtypes

from genmodel.generative_model import GenerativeModel
from genmodel.methods.chat_session import ChatSession
from genmodel.transport.genai import GenAITransport
from genmodel.types import (
    BatchEmbedContentsRequest,
    CachedContent,
    CountTokensRequest,
    EmbedContentRequest,
    GenerateContentRequest,
    ModelParams,
    RequestOptions,
    StartChatParams,
)
from tests.conftest import FakeTransport


def _make(
    transport: FakeTransport,
    model: str = "gemini-pro",
    request_options: RequestOptions | None = None,
    **params: object,
) -> GenerativeModel:
    return GenerativeModel(
        "test-key",
        ModelParams(model=model, **params),  # type: ignore[arg-type]
        request_options,
        transport=transport,
    )


class TestConstruction:
    def test_bare_name_is_prefixed(self, transport: FakeTransport) -> None:
        assert _make(transport).model == "models/gemini-pro"

    def test_prefixed_names_kept(self, transport: FakeTransport) -> None:
        assert _make(transport, model="models/gemini-pro").model == "models/gemini-pro"
        assert _make(transport, model="tunedModels/my-tune").model == "tunedModels/my-tune"

    def test_system_instruction_formatted(self, transport: FakeTransport) -> None:
        gm = _make(transport, system_instruction="be brief")
        assert gm.system_instruction is not None
        assert gm.system_instruction.role == "system"

    def test_defaults(self, transport: FakeTransport) -> None:
        gm = _make(transport)
        assert gm.safety_settings == []
        assert gm.request_options == RequestOptions()

    def test_default_transport(self) -> None:
        gm = GenerativeModel("test-key", ModelParams(model="gemini-pro"))
        assert isinstance(gm._transport, GenAITransport)


class TestGenerateContent:
    async def test_shorthand_request(self, transport: FakeTransport) -> None:
        gm = _make(transport, system_instruction="be brief")
        result = await gm.generate_content("hi")

        assert result.response.text() == "Hello world!"
        name, model, request, _ = transport.calls[0]
        assert (name, model) == ("generate_content", "models/gemini-pro")
        assert request.contents[0].parts[0].text == "hi"
        assert request.system_instruction.parts[0].text == "be brief"

    async def test_request_fields_override_model_config(self, transport: FakeTransport) -> None:
        model_config = gtypes.GenerationConfig(temperature=0.1)
        call_config = gtypes.GenerationConfig(temperature=0.9)
        gm = _make(transport, generation_config=model_config)

        await gm.generate_content(GenerateContentRequest(
            contents=[gtypes.Content(role="user", parts=[gtypes.Part(text="hi")])],
            generation_config=call_config,
        ))
        assert transport.last_request.generation_config is call_config

        await gm.generate_content("hi")
        assert transport.last_request.generation_config is model_config

    async def test_call_options_take_precedence(self, transport: FakeTransport) -> None:
        gm = _make(transport, request_options=RequestOptions(timeout=1000, api_version="v1"))
        await gm.generate_content("hi", RequestOptions(timeout=50))
        assert transport.last_options == RequestOptions(timeout=50, api_version="v1")

    async def test_attribute_changes_apply_to_next_call(self, transport: FakeTransport) -> None:
        gm = _make(transport)
        gm.tools = [gtypes.Tool(function_declarations=[gtypes.FunctionDeclaration(name="f")])]
        await gm.generate_content("hi")
        assert transport.last_request.tools == gm.tools

    async def test_cached_content_name_sent(self, transport: FakeTransport) -> None:
        gm = _make(transport, cached_content=CachedContent(name="cachedContents/abc", model="models/gemini-pro"))
        await gm.generate_content("hi")
        assert transport.last_request.cached_content == "cachedContents/abc"


class TestGenerateContentStream:
    async def test_uses_merged_options(self, transport: FakeTransport) -> None:
        gm = _make(transport, request_options=RequestOptions(base_url="https://proxy"))
        result = await gm.generate_content_stream("hi", RequestOptions(timeout=10))
        await result.response
        assert transport.calls[0][0] == "generate_content_stream"
        assert transport.last_options == RequestOptions(timeout=10, base_url="https://proxy")


class TestStartChat:
    def test_session_inherits_config(self, transport: FakeTransport) -> None:
        gm = _make(transport, system_instruction="sys")
        chat = gm.start_chat()
        assert isinstance(chat, ChatSession)
        assert chat.model == "models/gemini-pro"
        assert chat.params.system_instruction == gm.system_instruction
        assert chat.get_history() == []

    def test_params_override(self, transport: FakeTransport) -> None:
        gm = _make(transport, system_instruction="sys")
        history = [gtypes.Content(role="user", parts=[gtypes.Part(text="earlier")])]
        chat = gm.start_chat(StartChatParams(
            history=history,
            system_instruction=gtypes.Content(parts=[gtypes.Part(text="override")]),
        ))
        assert chat.get_history() == history
        assert chat.params.system_instruction.role == "system"  # type: ignore[union-attr]
        assert chat.params.system_instruction.parts[0].text == "override"  # type: ignore[union-attr, index]


class TestCountTokens:
    async def test_shorthand(self, transport: FakeTransport) -> None:
        gm = _make(transport)
        result = await gm.count_tokens("hello")
        assert result.total_tokens == 7
        assert transport.last_request.contents[0].parts[0].text == "hello"

    async def test_contents_request(self, transport: FakeTransport) -> None:
        gm = _make(transport)
        contents = [gtypes.Content(role="user", parts=[gtypes.Part(text="x")])]
        await gm.count_tokens(CountTokensRequest(contents=contents))
        assert transport.last_request.contents == contents


class TestEmbedding:
    async def test_embed_content(self, transport: FakeTransport) -> None:
        gm = _make(transport, model="text-embedding-004")
        result = await gm.embed_content("hello")
        assert result.embeddings[0].values == [0.1, 0.2, 0.3]  # type: ignore[index]
        name, model, request, _ = transport.calls[0]
        assert (name, model) == ("embed_content", "models/text-embedding-004")
        assert isinstance(request, EmbedContentRequest)

    async def test_batch_embed_contents(self, transport: FakeTransport) -> None:
        gm = _make(transport, model="text-embedding-004")
        gm_request = BatchEmbedContentsRequest(requests=[
            EmbedContentRequest(content=gtypes.Content(role="user", parts=[gtypes.Part(text=t)]))
            for t in ("a", "b")
        ])
        result = await gm.batch_embed_contents(gm_request)
        assert len(result.embeddings) == 2  # type: ignore[arg-type]
        assert transport.last_request is gm_request
