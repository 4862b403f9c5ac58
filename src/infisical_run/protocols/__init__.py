# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocols for infisical-run collaborators."""

from infisical_run.protocols.protocol_secrets_client import ProtocolSecretsClient

__all__: list[str] = ["ProtocolSecretsClient"]
