# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Boolean environment flag parsing."""

from __future__ import annotations

from collections.abc import Mapping

_TRUTHY_VALUES: frozenset[str] = frozenset({"true", "1", "yes", "on"})


def is_truthy(value: str | None) -> bool:
    """Return True when an environment flag value means "enabled".

    Accepts ``true``, ``1``, ``yes`` and ``on`` in any case, ignoring
    surrounding whitespace. Unset and every other value is False.
    """
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_VALUES


def any_flag_set(environ: Mapping[str, str], names: tuple[str, ...]) -> bool:
    """Return True when any of the named variables holds a truthy value."""
    return any(is_truthy(environ.get(name)) for name in names)


__all__: list[str] = ["any_flag_set", "is_truthy"]
