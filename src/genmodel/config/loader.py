"""Load :class:`Settings` from YAML files and ``GENMODEL_*`` environment variables.

Layers, lowest priority first: built-in defaults, the user's
``~/.genmodel/settings.yaml``, the project's ``.genmodel/settings.yaml``,
then the environment.  A higher layer replaces top-level values, merges the
``request`` section key by key and ``request.custom_headers`` header by
header.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from genmodel.config.settings import RequestSettings, Settings

if TYPE_CHECKING:
    from pathlib import Path

SETTINGS_DIR = ".genmodel"
SETTINGS_FILE = "settings.yaml"
ENV_PREFIX = "GENMODEL_"

_REQUEST = "request"
_HEADERS = "custom_headers"


def env_variables() -> dict[str, tuple[str, ...]]:
    """Map every supported environment variable to the settings key it sets.

    Scalar fields of :class:`Settings` and :class:`RequestSettings` each get
    ``GENMODEL_<FIELD>`` (``GENMODEL_DEFAULT_MODEL``, ``GENMODEL_TIMEOUT``,
    ...).  Raw strings are left for pydantic to coerce.
    """
    variables = {
        ENV_PREFIX + name.upper(): (name,)
        for name in Settings.model_fields
        if name != _REQUEST
    }
    variables.update(
        (ENV_PREFIX + name.upper(), (_REQUEST, name))
        for name in RequestSettings.model_fields
        if name != _HEADERS
    )
    return variables


def _env_layer() -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for env_var, key in env_variables().items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if len(key) == 1:
            layer[key[0]] = value
        else:
            layer.setdefault(key[0], {})[key[1]] = value
    return layer


def _file_layer(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping in {path}, got {type(data).__name__}")
    return data


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    merged = {**base, **layer}
    lower, upper = base.get(_REQUEST), layer.get(_REQUEST)
    if isinstance(lower, dict) and isinstance(upper, dict):
        request = {**lower, **upper}
        if isinstance(lower.get(_HEADERS), dict) and isinstance(upper.get(_HEADERS), dict):
            request[_HEADERS] = {**lower[_HEADERS], **upper[_HEADERS]}
        merged[_REQUEST] = request
    return merged


async def load_settings(
    project_dir: Path | None = None,
    user_dir: Path | None = None,
) -> Settings:
    """Load and validate settings for *project_dir* and *user_dir*.

    Raises
    ------
    ValueError
        If a settings file is not a YAML mapping, or the merged values fail
        validation (including a reserved header in ``custom_headers``).
    """
    merged: dict[str, Any] = {}
    for base_dir in (user_dir, project_dir):
        if base_dir is not None:
            merged = _overlay(merged, _file_layer(base_dir / SETTINGS_DIR / SETTINGS_FILE))
    merged = _overlay(merged, _env_layer())

    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
