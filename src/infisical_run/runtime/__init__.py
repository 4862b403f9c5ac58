# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Runtime module for infisical-run.

Modules
-------
- **constants_env**: Environment variable names and defaults
- **dotenv_loader**: Dotenv file parsing with shell-like variable expansion
- **project_config_loader**: Soft-failing reader for ``.infisical.json``
- **env_resolver**: ``EnvResolver``, the layered precedence resolution
- **process_launcher**: Process replacement with the resolved environment

The submodules are imported directly (``infisical_run.runtime.env_resolver``);
this package does not re-export them so that the models package can read
``constants_env`` without an import cycle.
"""

__all__: list[str] = []
