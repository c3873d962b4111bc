"""Normalise caller input into request dataclasses."""

from __future__ import annotations

from dataclasses import fields, replace
from typing import TYPE_CHECKING, TypeVar

from google.genai import types as gtypes

from genmodel.errors import (
    GoogleGenerativeAIError,
    GoogleGenerativeAIRequestInputError,
)
from genmodel.types import (
    CountTokensRequest,
    EmbedContentRequest,
    GenerateContentRequest,
)

if TYPE_CHECKING:
    from genmodel.types import (
        PartInput,
        RequestInput,
        SystemInstructionInput,
    )

_R = TypeVar("_R")


def format_system_instruction(
    value: SystemInstructionInput | None,
) -> gtypes.Content | None:
    """Coerce a system instruction into a ``Content`` with the ``system`` role."""
    if value is None:
        return None
    if isinstance(value, str):
        return gtypes.Content(role="system", parts=[gtypes.Part(text=value)])
    if isinstance(value, gtypes.Part):
        return gtypes.Content(role="system", parts=[value])
    if not value.role:
        return gtypes.Content(role="system", parts=value.parts)
    return value


def format_new_content(request: RequestInput) -> gtypes.Content:
    """Wrap a string, part, or list of them into a single ``Content``."""
    items: list[PartInput] = request if isinstance(request, list) else [request]
    parts = [
        gtypes.Part(text=item) if isinstance(item, str) else item
        for item in items
    ]
    return _assign_role_to_parts_and_validate_send_message_request(parts)


def _assign_role_to_parts_and_validate_send_message_request(
    parts: list[gtypes.Part],
) -> gtypes.Content:
    user_content: list[gtypes.Part] = []
    function_content: list[gtypes.Part] = []
    for part in parts:
        if part.function_response is not None:
            function_content.append(part)
        else:
            user_content.append(part)

    if user_content and function_content:
        raise GoogleGenerativeAIError(
            "Within a single message, FunctionResponse cannot be mixed "
            "with other type of part in the request for sending chat message.",
        )
    if not user_content and not function_content:
        raise GoogleGenerativeAIError(
            "No content is provided for sending chat message.",
        )
    if user_content:
        return gtypes.Content(role="user", parts=user_content)
    return gtypes.Content(role="function", parts=function_content)


def format_generate_content_input(
    request: GenerateContentRequest | RequestInput,
) -> GenerateContentRequest:
    """Return a :class:`GenerateContentRequest` for any accepted input shape."""
    if isinstance(request, GenerateContentRequest):
        if request.system_instruction is not None:
            return replace(
                request,
                system_instruction=format_system_instruction(request.system_instruction),
            )
        return request
    return GenerateContentRequest(contents=[format_new_content(request)])


def format_count_tokens_input(
    request: CountTokensRequest | RequestInput,
    model_request: GenerateContentRequest,
) -> GenerateContentRequest:
    """Build the generation request whose tokens should be counted.

    *model_request* carries the model's persistent configuration with empty
    ``contents``.
    """
    if not isinstance(request, CountTokensRequest):
        return replace(model_request, contents=[format_new_content(request)])

    if request.contents is not None:
        if request.generate_content_request is not None:
            raise GoogleGenerativeAIRequestInputError(
                "CountTokensRequest must have one of contents or "
                "generate_content_request, not both.",
            )
        return replace(model_request, contents=list(request.contents))
    if request.generate_content_request is not None:
        return merge_request(model_request, request.generate_content_request)
    raise GoogleGenerativeAIRequestInputError(
        "CountTokensRequest must have one of contents or generate_content_request.",
    )


def format_embed_content_input(
    request: EmbedContentRequest | RequestInput,
) -> EmbedContentRequest:
    """Return an :class:`EmbedContentRequest` for any accepted input shape."""
    if isinstance(request, EmbedContentRequest):
        return request
    return EmbedContentRequest(content=format_new_content(request))


def merge_request(base: _R, override: object) -> _R:
    """Return *base* with every non-``None`` field of *override* that *base* also has.

    Used to lay call-scoped request fields over the model's persistent
    configuration: fields the call leaves unset keep the model's value.
    """
    base_names = {f.name for f in fields(base)}  # type: ignore[arg-type]
    changes = {
        f.name: getattr(override, f.name)
        for f in fields(override)  # type: ignore[arg-type]
        if f.name in base_names and getattr(override, f.name) is not None
    }
    return replace(base, **changes)  # type: ignore[type-var]
