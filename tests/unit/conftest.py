# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shared pytest configuration for all unit tests.

This conftest.py automatically applies the `unit` marker to all tests
in the tests/unit/ directory hierarchy and provides the fixtures shared by
the resolver, loader and CLI tests.

Fixtures:
    workdir: Empty temporary directory that is also the current directory.
    write_file: Helper writing a text file relative to ``workdir``.
    secrets_client: ``InMemorySecretsClient`` with no secrets.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from infisical_run.testing import InMemorySecretsClient


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Dynamically add unit marker to all tests in the unit directory.

    pytestmark defined in conftest.py does NOT automatically apply to tests
    in other files, so the marker is added here after collection.
    """
    unit_marker = pytest.mark.unit

    for item in items:
        if "tests/unit" in str(item.fspath):
            if not any(marker.name == "unit" for marker in item.iter_markers()):
                item.add_marker(unit_marker)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_file(workdir: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes ``content`` to ``name`` under ``workdir``."""

    def _write(name: str, content: str) -> Path:
        path = workdir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def secrets_client() -> InMemorySecretsClient:
    """Provide an in-memory secrets client with no secrets."""
    return InMemorySecretsClient()
