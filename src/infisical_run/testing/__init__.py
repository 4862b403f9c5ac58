# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test doubles for infisical-run collaborators."""

from infisical_run.testing.secrets_client_in_memory import InMemorySecretsClient

__all__: list[str] = ["InMemorySecretsClient"]
