"""Tests for genmodel.config.settings: Settings Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from genmodel.config.settings import RequestSettings, Settings
from genmodel.types import RequestOptions


class TestRequestSettings:
    def test_defaults(self) -> None:
        cfg = RequestSettings()
        assert cfg.timeout is None
        assert cfg.custom_headers == {}

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestSettings(timeout=-1)

    def test_api_client_header_rejected(self) -> None:
        with pytest.raises(ValidationError, match="reserved"):
            RequestSettings(custom_headers={"x-goog-api-client": "mine"})


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.default_model == "gemini-2.0-flash"
        assert s.api_key is None
        assert isinstance(s.request, RequestSettings)
        assert s.verbose is False

    def test_unknown_keys_ignored(self) -> None:
        s = Settings.model_validate({"default_model": "m", "theme": "dark"})
        assert s.default_model == "m"

    def test_request_options_default(self) -> None:
        assert Settings().request_options() == RequestOptions()

    def test_request_options_conversion(self) -> None:
        s = Settings(request=RequestSettings(
            timeout=100,
            api_version="v1",
            base_url="https://proxy",
            custom_headers={"X-Trace": "abc"},
            api_client="app/1",
        ))
        assert s.request_options() == RequestOptions(
            timeout=100,
            api_version="v1",
            base_url="https://proxy",
            custom_headers={"X-Trace": "abc"},
            api_client="app/1",
        )
