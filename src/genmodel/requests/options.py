"""Request-option merging and header construction."""

from __future__ import annotations

from dataclasses import fields

from genmodel.errors import GoogleGenerativeAIRequestInputError
from genmodel.types import RequestOptions

API_CLIENT_HEADER = "x-goog-api-client"
PACKAGE_LOG_HEADER = "genmodel"


def merge_request_options(
    base: RequestOptions | None,
    override: RequestOptions | None,
) -> RequestOptions:
    """Return *base* with every non-``None`` field of *override* applied.

    Fields the call does not set fall back to the instance defaults.
    """
    if base is None:
        base = RequestOptions()
    if override is None:
        return base
    values = {
        f.name: getattr(override, f.name)
        if getattr(override, f.name) is not None
        else getattr(base, f.name)
        for f in fields(RequestOptions)
    }
    return RequestOptions(**values)


def build_headers(request_options: RequestOptions) -> dict[str, str]:
    """Build the extra HTTP headers for a call.

    Raises
    ------
    GoogleGenerativeAIRequestInputError
        If ``custom_headers`` tries to set ``x-goog-api-client`` directly.
    """
    from genmodel import __version__

    headers: dict[str, str] = {}
    if request_options.custom_headers:
        for name, value in request_options.custom_headers.items():
            if name.lower() == API_CLIENT_HEADER:
                raise GoogleGenerativeAIRequestInputError(
                    f"Cannot set reserved header name {name}; "
                    "use RequestOptions.api_client instead",
                )
            headers[name] = value
    if request_options.api_client:
        headers[API_CLIENT_HEADER] = (
            f"{request_options.api_client} {PACKAGE_LOG_HEADER}/{__version__}"
        )
    return headers
