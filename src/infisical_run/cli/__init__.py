# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Command-line entry points."""

from infisical_run.cli.cli_run import cli, main

__all__: list[str] = ["cli", "main"]
