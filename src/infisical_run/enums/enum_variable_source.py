# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Variable Source Enumeration.

Identifies the layer a set of environment variables was loaded from. The
members are listed in ascending precedence order, which is also the order in
which the resolver applies them.
"""

from enum import Enum


class EnumVariableSource(str, Enum):
    """Sources of environment variables, lowest precedence first.

    Attributes:
        DEFAULT_DOTENV_PRE: Default dotenv file, loaded before authentication.
        SECRETS: Secrets fetched from the secrets manager.
        DEFAULT_DOTENV_POST: Default dotenv file, reloaded after the secrets merge.
        EXTRA_DOTENV: Additional dotenv file named on the command line.
        SHELL_SNAPSHOT: Shell snapshot reapplied at the end.
    """

    DEFAULT_DOTENV_PRE = "default_dotenv_pre"
    SECRETS = "secrets"
    DEFAULT_DOTENV_POST = "default_dotenv_post"
    EXTRA_DOTENV = "extra_dotenv"
    SHELL_SNAPSHOT = "shell_snapshot"


__all__ = ["EnumVariableSource"]
