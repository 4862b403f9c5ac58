# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Local project config (``.infisical.json``) loading.

The Infisical CLI writes this file with ``infisical init``. Only two fields
matter here: ``workspaceId`` (the project ID) and ``defaultEnvironment``.

Reading is soft-failing. A missing file, an unreadable file or contents that
are not valid JSON all produce an empty ``ModelProjectConfig`` rather than an
error; the resolver decides whether an absent project ID is fatal. For
JSON-like files that do not parse, the fields are recovered with a line scan
for ``"field": "value"`` pairs.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from infisical_run.models import ModelProjectConfig

logger = logging.getLogger(__name__)

_FIELD_WORKSPACE_ID = "workspaceId"
_FIELD_DEFAULT_ENVIRONMENT = "defaultEnvironment"

_FIELD_LINE_PATTERN = re.compile(r'"?(?P<field>\w+)"?\s*:\s*"?(?P<value>[^",}\s]*)"?')


def _scan_fields(text: str) -> dict[str, str]:
    """Recover ``"field": "value"`` pairs from text that is not valid JSON."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        match = _FIELD_LINE_PATTERN.search(line)
        if match and match.group("value"):
            fields.setdefault(match.group("field"), match.group("value"))
    return fields


def _as_optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def load_project_config(path: Path) -> ModelProjectConfig:
    """Read the project ID and default environment from a project config file.

    Args:
        path: Location of the project config file.

    Returns:
        The fields found; both are None when the file is absent or unusable.
    """
    if not path.is_file():
        logger.debug("no %s file found", path)
        return ModelProjectConfig()

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("unable to read %s: %s", path, exc)
        return ModelProjectConfig()

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("%s is not valid JSON, scanning for fields", path)
        data = _scan_fields(text)

    if not isinstance(data, dict):
        logger.debug("%s does not contain an object", path)
        return ModelProjectConfig()

    config = ModelProjectConfig(
        workspace_id=_as_optional_str(data.get(_FIELD_WORKSPACE_ID)),
        default_environment=_as_optional_str(data.get(_FIELD_DEFAULT_ENVIRONMENT)),
    )
    logger.debug(
        "loaded project config from %s",
        path,
        extra={
            "has_workspace_id": config.workspace_id is not None,
            "default_environment": config.default_environment,
        },
    )
    return config


__all__ = ["load_project_config"]
