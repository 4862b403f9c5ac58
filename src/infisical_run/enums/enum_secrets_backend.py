# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Backend Enumeration."""

from enum import Enum


class EnumSecretsBackend(str, Enum):
    """Implementations available for talking to Infisical.

    Attributes:
        CLI: Shell out to the ``infisical`` command-line client.
        SDK: Use the ``infisicalsdk`` Python package.
    """

    CLI = "cli"
    SDK = "sdk"


__all__ = ["EnumSecretsBackend"]
