# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Dotenv file loading.

Parsing is delegated to ``python-dotenv``, which handles ``export`` prefixes,
comments, single and double quoting, escapes and multi-line quoted values.

Variable references are expanded here rather than by python-dotenv, because
python-dotenv resolves them against ``os.environ`` while the resolver threads
its own Variable Set. ``${NAME}``, ``${NAME:-default}`` and bare ``$NAME`` are
resolved against the running Variable Set overlaid with the keys defined
earlier in the same file, which is what ``set -a; source FILE`` gives in a
shell. Single-quoted values are taken literally, as in a shell.

Lines without an ``=`` (bare ``NAME``) carry no value and are skipped.
"""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from dotenv.parser import Binding, parse_stream
from dotenv.variables import Literal, parse_variables

from infisical_run.enums import EnumVariableSource
from infisical_run.errors import DotenvFileNotFoundError, ModelResolverErrorContext
from infisical_run.models import ModelVariableSet

logger = logging.getLogger(__name__)

_BARE_REFERENCE = re.compile(r"\$(?P<name>[A-Za-z_][A-Za-z0-9_]*)")
_SINGLE_QUOTED_VALUE = re.compile(r"^[^=]*=[ \t]*'")


def _is_single_quoted(binding: Binding) -> bool:
    """Return True when the statement's value was written in single quotes."""
    return bool(_SINGLE_QUOTED_VALUE.match(binding.original.string.lstrip()))


def expand_references(value: str, scope: Mapping[str, str | None]) -> str:
    """Expand ``${NAME}``, ``${NAME:-default}`` and ``$NAME`` against ``scope``.

    Unset names expand to the empty string.
    """
    expanded: list[str] = []
    for atom in parse_variables(value):
        if isinstance(atom, Literal):
            expanded.append(
                _BARE_REFERENCE.sub(
                    lambda match: scope.get(match.group("name")) or "", atom.value
                )
            )
        else:
            expanded.append(atom.resolve(scope))
    return "".join(expanded)


def parse_dotenv_text(text: str) -> ModelVariableSet:
    """Parse an in-memory dotenv document without variable expansion.

    Used for the output of ``infisical export``, whose values are literal.
    """
    raw = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return ModelVariableSet.from_mapping(
        {name: value for name, value in raw.items() if value is not None}
    )


class DotenvLoader:
    """Loads dotenv files into Variable Sets.

    Example:
        >>> loader = DotenvLoader()
        >>> running = ModelVariableSet.from_mapping({"HOST": "db"})
        >>> loaded = loader.load(Path(".env"), base=running)
        >>> running = running.merged_with(loaded)
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def load(
        self,
        path: Path,
        base: ModelVariableSet | None = None,
        source: EnumVariableSource = EnumVariableSource.EXTRA_DOTENV,
    ) -> ModelVariableSet:
        """Load a dotenv file.

        Args:
            path: File to load.
            base: Running Variable Set that references are expanded against.
            source: Layer being loaded, recorded in error context.

        Returns:
            Only the variables defined by the file, expanded.

        Raises:
            DotenvFileNotFoundError: If ``path`` is not an existing file.
        """
        if not path.is_file():
            context = ModelResolverErrorContext(
                source=source,
                operation="load_dotenv",
                target_name=str(path),
            )
            raise DotenvFileNotFoundError(
                f"requested dotenv file {path} not found",
                path=str(path),
                context=context,
            )

        logger.debug("loading env file %s", path)
        with path.open(encoding=self._encoding) as stream:
            bindings = list(parse_stream(stream))

        scope: dict[str, str | None] = dict(base.variables) if base is not None else {}
        loaded: dict[str, str] = {}
        for binding in bindings:
            if binding.error:
                logger.warning(
                    "could not parse statement starting at line %s of %s",
                    binding.original.line,
                    path,
                )
                continue
            if binding.key is None:
                continue
            if binding.value is None:
                logger.debug("skipping %s in %s: no value assigned", binding.key, path)
                continue
            if _is_single_quoted(binding):
                value = binding.value
            else:
                value = expand_references(binding.value, scope)
            loaded[binding.key] = value
            scope[binding.key] = value

        logger.debug(
            "loaded %d variables from %s",
            len(loaded),
            path,
            extra={"source": source.value, "path": str(path)},
        )
        return ModelVariableSet.from_mapping(loaded)


__all__ = ["DotenvLoader", "expand_references", "parse_dotenv_text"]
