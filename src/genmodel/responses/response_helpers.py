"""Text and function-call accessors for generation responses.

Every response handed to callers, streamed chunks and final aggregates
alike, is an :class:`EnhancedGenerateContentResponse`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from google.genai import types as gtypes

from genmodel.errors import GoogleGenerativeAIResponseError

logger = logging.getLogger(__name__)

_BAD_FINISH_REASONS = frozenset({"RECITATION", "SAFETY", "LANGUAGE"})


def _enum_name(value: Any) -> str:
    """Return the wire name of an SDK enum value (or the value itself)."""
    return str(getattr(value, "value", value))


def had_bad_finish_reason(candidate: gtypes.Candidate) -> bool:
    """Return whether *candidate* stopped for a reason that withholds its text."""
    return (
        candidate.finish_reason is not None
        and _enum_name(candidate.finish_reason) in _BAD_FINISH_REASONS
    )


def format_block_error_message(response: gtypes.GenerateContentResponse) -> str:
    """Describe why *response* was blocked, or return ``""``."""
    message = ""
    if not response.candidates and response.prompt_feedback is not None:
        message += "Response was blocked"
        feedback = response.prompt_feedback
        if feedback.block_reason is not None:
            message += f" due to {_enum_name(feedback.block_reason)}"
        if feedback.block_reason_message:
            message += f": {feedback.block_reason_message}"
    elif response.candidates:
        first = response.candidates[0]
        if had_bad_finish_reason(first):
            message += f"Candidate was blocked due to {_enum_name(first.finish_reason)}"
            if first.finish_message:
                message += f": {first.finish_message}"
    return message


def get_text(response: gtypes.GenerateContentResponse) -> str:
    """Concatenate the text parts of the first candidate.

    Thought parts are skipped.  Executable code and code-execution results
    are rendered as fenced blocks.
    """
    if not response.candidates:
        return ""
    content = response.candidates[0].content
    if content is None or not content.parts:
        return ""

    pieces: list[str] = []
    for part in content.parts:
        if part.thought:
            continue
        if part.text is not None:
            pieces.append(part.text)
        if part.executable_code is not None:
            language = _enum_name(part.executable_code.language or "").lower()
            pieces.append(f"\n```{language}\n{part.executable_code.code or ''}\n```\n")
        if part.code_execution_result is not None:
            pieces.append(f"\n```\n{part.code_execution_result.output or ''}\n```\n")
    return "".join(pieces)


def get_function_calls(
    response: gtypes.GenerateContentResponse,
) -> list[gtypes.FunctionCall] | None:
    """Return the function calls of the first candidate, or ``None``."""
    if not response.candidates:
        return None
    content = response.candidates[0].content
    if content is None or not content.parts:
        return None
    calls = [part.function_call for part in content.parts if part.function_call is not None]
    return calls or None


@dataclass(frozen=True)
class EnhancedGenerateContentResponse:
    """A ``GenerateContentResponse`` with blocking-aware accessors.

    The SDK response is kept as :attr:`raw`; the commonly read fields are
    exposed directly.
    """

    raw: gtypes.GenerateContentResponse

    @property
    def candidates(self) -> list[gtypes.Candidate] | None:
        return self.raw.candidates

    @property
    def prompt_feedback(self) -> gtypes.GenerateContentResponsePromptFeedback | None:
        return self.raw.prompt_feedback

    @property
    def usage_metadata(self) -> gtypes.GenerateContentResponseUsageMetadata | None:
        return self.raw.usage_metadata

    @property
    def model_version(self) -> str | None:
        return self.raw.model_version

    def text(self) -> str:
        """Return the text of the first candidate.

        Raises
        ------
        GoogleGenerativeAIResponseError
            If the prompt or the first candidate was blocked.
        """
        candidates = self.raw.candidates
        if candidates:
            if len(candidates) > 1:
                logger.warning(
                    "This response had %d candidates. Returning text from the "
                    "first candidate only. Access response.candidates directly "
                    "to use the other candidates.",
                    len(candidates),
                )
            if had_bad_finish_reason(candidates[0]):
                raise GoogleGenerativeAIResponseError(
                    format_block_error_message(self.raw), self.raw,
                )
            return get_text(self.raw)
        if self.raw.prompt_feedback is not None:
            raise GoogleGenerativeAIResponseError(
                f"Text not available. {format_block_error_message(self.raw)}",
                self.raw,
            )
        return ""

    def function_calls(self) -> list[gtypes.FunctionCall] | None:
        """Return the function calls of the first candidate, or ``None``.

        Raises
        ------
        GoogleGenerativeAIResponseError
            If the prompt or the first candidate was blocked.
        """
        candidates = self.raw.candidates
        if candidates:
            if had_bad_finish_reason(candidates[0]):
                raise GoogleGenerativeAIResponseError(
                    format_block_error_message(self.raw), self.raw,
                )
            return get_function_calls(self.raw)
        if self.raw.prompt_feedback is not None:
            raise GoogleGenerativeAIResponseError(
                f"Function call not available. {format_block_error_message(self.raw)}",
                self.raw,
            )
        return None


def add_helpers(response: gtypes.GenerateContentResponse) -> EnhancedGenerateContentResponse:
    """Wrap an SDK response in :class:`EnhancedGenerateContentResponse`."""
    return EnhancedGenerateContentResponse(raw=response)
