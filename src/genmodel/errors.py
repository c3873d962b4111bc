"""Error types for the generative model facade."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from google.genai import types as gtypes


class GoogleGenerativeAIError(Exception):
    """Base exception for generative model errors."""

    def __init__(self, message: str) -> None:
        super().__init__(f"[GoogleGenerativeAI Error]: {message}")


class GoogleGenerativeAIResponseError(GoogleGenerativeAIError):
    """Raised when a response is blocked or its content cannot be read."""

    def __init__(
        self,
        message: str,
        response: gtypes.GenerateContentResponse | None = None,
    ) -> None:
        super().__init__(message)
        self.response = response


class GoogleGenerativeAIFetchError(GoogleGenerativeAIError):
    """Raised when the service call fails or returns an error status.

    Args:
        message: Error message.
        status: HTTP status code if available.
        status_text: Status name reported by the service (e.g. ``NOT_FOUND``).
        error_details: Structured details from the error body, if any.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        status_text: str | None = None,
        error_details: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.error_details = error_details


class GoogleGenerativeAIRequestInputError(GoogleGenerativeAIError):
    """Raised when request input is invalid before anything is sent."""

    pass


__all__ = [
    "GoogleGenerativeAIError",
    "GoogleGenerativeAIFetchError",
    "GoogleGenerativeAIRequestInputError",
    "GoogleGenerativeAIResponseError",
]
