"""Tests for genmodel.requests.options."""

from __future__ import annotations

import pytest

from genmodel import __version__
from genmodel.errors import GoogleGenerativeAIRequestInputError
from genmodel.requests.options import build_headers, merge_request_options
from genmodel.types import RequestOptions


class TestMergeRequestOptions:
    def test_call_options_win_per_field(self) -> None:
        base = RequestOptions(timeout=1000, api_version="v1", base_url="https://a")
        merged = merge_request_options(base, RequestOptions(timeout=50))
        assert merged == RequestOptions(timeout=50, api_version="v1", base_url="https://a")

    def test_none_override_returns_base(self) -> None:
        base = RequestOptions(timeout=1000)
        assert merge_request_options(base, None) is base

    def test_none_base(self) -> None:
        assert merge_request_options(None, None) == RequestOptions()

    def test_zero_timeout_is_a_value(self) -> None:
        merged = merge_request_options(RequestOptions(timeout=1000), RequestOptions(timeout=0))
        assert merged.timeout == 0


class TestBuildHeaders:
    def test_empty(self) -> None:
        assert build_headers(RequestOptions()) == {}

    def test_custom_headers(self) -> None:
        headers = build_headers(RequestOptions(custom_headers={"X-Trace": "abc"}))
        assert headers == {"X-Trace": "abc"}

    def test_api_client(self) -> None:
        headers = build_headers(RequestOptions(api_client="my-app/1.0"))
        assert headers["x-goog-api-client"] == f"my-app/1.0 genmodel/{__version__}"

    def test_reserved_header_rejected(self) -> None:
        with pytest.raises(GoogleGenerativeAIRequestInputError, match="reserved header"):
            build_headers(RequestOptions(custom_headers={"X-Goog-Api-Client": "x"}))
