# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""infisical-run - launch a command with a layered environment.

Resolves a process environment from the calling shell, dotenv files and the
Infisical secrets manager, then replaces itself with the target command.

Key Components:
    - EnvResolver: precedence resolution over an explicit Variable Set
    - ProtocolSecretsClient: authenticate / fetch_secrets capability, with
      Infisical CLI and SDK adapters
    - DotenvLoader: dotenv parsing with shell-like variable expansion
    - infisical-run: click command wrapping it all
"""

__version__ = "1.0.0"

__all__: list[str] = ["__version__"]
