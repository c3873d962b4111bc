"""Settings Pydantic models for genmodel configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from genmodel.requests.options import API_CLIENT_HEADER
from genmodel.types import RequestOptions


class RequestSettings(BaseModel):
    """Default request options applied to every call."""

    timeout: int | None = Field(default=None, ge=0, description="Timeout in milliseconds")
    api_version: str | None = None
    base_url: str | None = None
    custom_headers: dict[str, str] = Field(default_factory=dict)
    api_client: str | None = None

    model_config = {"extra": "ignore"}

    @field_validator("custom_headers")
    @classmethod
    def _reject_api_client_header(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if name.lower() == API_CLIENT_HEADER:
                raise ValueError(f"{name} is reserved; set request.api_client instead")
        return value


class Settings(BaseModel):
    """Top-level settings model."""

    default_model: str = "gemini-2.0-flash"
    api_key: str | None = None
    request: RequestSettings = Field(default_factory=RequestSettings)
    verbose: bool = False

    model_config = {"extra": "ignore"}

    def request_options(self) -> RequestOptions:
        """Return the configured defaults as :class:`~genmodel.types.RequestOptions`."""
        return RequestOptions(
            timeout=self.request.timeout,
            api_version=self.request.api_version,
            base_url=self.request.base_url,
            custom_headers=dict(self.request.custom_headers) or None,
            api_client=self.request.api_client,
        )
