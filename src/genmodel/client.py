"""Entry point: builds configured :class:`GenerativeModel` instances."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from genmodel.env_api_keys import get_env_api_key
from genmodel.errors import GoogleGenerativeAIError, GoogleGenerativeAIRequestInputError
from genmodel.generative_model import GenerativeModel
from genmodel.requests.request_helpers import format_system_instruction
from genmodel.types import ModelParams

if TYPE_CHECKING:
    from genmodel.config.settings import Settings
    from genmodel.transport.base import Transport
    from genmodel.types import CachedContent, RequestOptions


class GoogleGenerativeAI:
    """Top-level client holding the API key.

    Parameters
    ----------
    api_key:
        API key.  Falls back to ``GOOGLE_API_KEY`` / ``GEMINI_API_KEY``.
    transport:
        Transport shared by every model this client creates.  Defaults to
        one :class:`~genmodel.transport.genai.GenAITransport` per model.
    """

    def __init__(
        self,
        api_key: str | None = None,
        transport: Transport | None = None,
    ) -> None:
        key = api_key or get_env_api_key()
        if not key:
            raise GoogleGenerativeAIRequestInputError(
                "No API key provided. Pass api_key or set GOOGLE_API_KEY.",
            )
        self.api_key = key
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Transport | None = None,
    ) -> GoogleGenerativeAI:
        """Create a client from loaded :class:`~genmodel.config.settings.Settings`."""
        return cls(api_key=settings.api_key, transport=transport)

    def get_generative_model(
        self,
        model_params: ModelParams,
        request_options: RequestOptions | None = None,
    ) -> GenerativeModel:
        """Return a :class:`GenerativeModel` for *model_params*."""
        if not model_params.model:
            raise GoogleGenerativeAIError(
                "Must provide a model name. "
                "Example: genai.get_generative_model(ModelParams(model='my-model-name'))",
            )
        return GenerativeModel(
            self.api_key, model_params, request_options, transport=self._transport,
        )

    def get_generative_model_from_cached_content(
        self,
        cached_content: CachedContent,
        model_params: ModelParams | None = None,
        request_options: RequestOptions | None = None,
    ) -> GenerativeModel:
        """Return a :class:`GenerativeModel` that uses *cached_content*.

        The model name, system instruction, tools and tool config come from
        the cached content and replace whatever *model_params* holds.
        *model_params* may repeat the model name, system instruction or tools
        only with identical values.  Setting one the cached content leaves
        empty is a conflict too, since the cached value (``None``) would
        otherwise discard it silently.
        """
        if not cached_content.name:
            raise GoogleGenerativeAIRequestInputError(
                "Cached content must contain a `name` field.",
            )
        if not cached_content.model:
            raise GoogleGenerativeAIRequestInputError(
                "Cached content must contain a `model` field.",
            )

        if model_params is not None:
            conflict = _find_conflict(model_params, cached_content)
            if conflict is not None:
                raise GoogleGenerativeAIRequestInputError(
                    f"Different value for {conflict!r} specified in model_params "
                    f"and cached_content.",
                )

        params = model_params or ModelParams(model=cached_content.model)
        params = replace(
            params,
            model=cached_content.model,
            tools=cached_content.tools,
            tool_config=cached_content.tool_config,
            system_instruction=cached_content.system_instruction,
            cached_content=cached_content,
        )
        return GenerativeModel(
            self.api_key, params, request_options, transport=self._transport,
        )


def _find_conflict(model_params: ModelParams, cached_content: CachedContent) -> str | None:
    """Return the first field set in *model_params* that disagrees with *cached_content*.

    A field set only in *model_params* counts as a disagreement.
    """
    if model_params.model and (
        model_params.model.removeprefix("models/")
        != (cached_content.model or "").removeprefix("models/")
    ):
        return "model"
    if (
        model_params.system_instruction is not None
        and format_system_instruction(model_params.system_instruction)
        != format_system_instruction(cached_content.system_instruction)
    ):
        return "system_instruction"
    if model_params.tools is not None and model_params.tools != cached_content.tools:
        return "tools"
    return None
