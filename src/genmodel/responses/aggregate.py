"""Merge streamed response chunks into one final response."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from google.genai import types as gtypes

# Candidate fields where the last chunk that sets them wins.
_LAST_WINS_FIELDS = (
    "finish_reason",
    "finish_message",
    "safety_ratings",
    "citation_metadata",
    "grounding_metadata",
)


@dataclass
class _CandidateAccumulator:
    index: int
    role: str | None = None
    parts: list[gtypes.Part] = field(default_factory=list)
    has_content: bool = False
    last: dict[str, Any] = field(default_factory=dict)

    def add(self, candidate: gtypes.Candidate) -> None:
        for name in _LAST_WINS_FIELDS:
            value = getattr(candidate, name)
            if value is not None:
                self.last[name] = value
        content = candidate.content
        if content is None or content.parts is None:
            return
        self.has_content = True
        if self.role is None:
            self.role = content.role or "user"
        for part in content.parts:
            self._append_part(part)

    def _append_part(self, part: gtypes.Part) -> None:
        previous = self.parts[-1] if self.parts else None
        if (
            previous is not None
            and _is_plain_text(previous)
            and _is_plain_text(part)
        ):
            self.parts[-1] = gtypes.Part(
                text=(previous.text or "") + (part.text or ""),
                thought_signature=part.thought_signature or previous.thought_signature,
            )
        else:
            self.parts.append(part.model_copy())

    def build(self) -> gtypes.Candidate:
        content = (
            gtypes.Content(role=self.role, parts=self.parts)
            if self.has_content
            else None
        )
        return gtypes.Candidate(index=self.index, content=content, **self.last)


def _is_plain_text(part: gtypes.Part) -> bool:
    return part.text is not None and not part.thought


def aggregate_responses(
    responses: list[gtypes.GenerateContentResponse],
) -> gtypes.GenerateContentResponse:
    """Merge streamed chunks, in arrival order, into one response.

    Candidates are merged by index.  Adjacent text parts are concatenated;
    other parts are appended as they arrive.
    """
    candidates: dict[int, _CandidateAccumulator] = {}
    prompt_feedback: gtypes.GenerateContentResponsePromptFeedback | None = None
    usage_metadata: gtypes.GenerateContentResponseUsageMetadata | None = None
    model_version: str | None = None

    for response in responses:
        for position, candidate in enumerate(response.candidates or []):
            index = candidate.index if candidate.index is not None else position
            if index not in candidates:
                candidates[index] = _CandidateAccumulator(index=index)
            candidates[index].add(candidate)
        if response.prompt_feedback is not None:
            prompt_feedback = response.prompt_feedback
        if response.usage_metadata is not None:
            usage_metadata = response.usage_metadata
        if response.model_version is not None:
            model_version = response.model_version

    return gtypes.GenerateContentResponse(
        candidates=[candidates[i].build() for i in sorted(candidates)] or None,
        prompt_feedback=prompt_feedback,
        usage_metadata=usage_metadata,
        model_version=model_version,
    )
