from __future__ import annotations

import os

# Environment variables checked for an API key, in order.
# The first non-empty value wins.
_ENV_KEYS: list[str] = ["GOOGLE_API_KEY", "GEMINI_API_KEY"]


def get_env_api_key() -> str | None:
    """Return the first non-empty API key found in the environment.

    Returns ``None`` when no matching variable is set.
    """
    for var in _ENV_KEYS:
        val = os.environ.get(var)
        if val:
            return val
    return None
