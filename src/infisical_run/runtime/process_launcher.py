# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Target command launch.

The resolved environment is handed to the target command by replacing the
current process image (``os.execvpe``). There is no supervision and no output
capture; the command's exit code becomes the exit code of the invocation.
On success ``launch_process`` never returns.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping, Sequence
from typing import NoReturn

from infisical_run.errors import ModelResolverErrorContext, ProcessLaunchError

logger = logging.getLogger(__name__)

ExecFunction = Callable[[str, Sequence[str], Mapping[str, str]], object]

# Shell conventions for exec failures
EXIT_COMMAND_NOT_FOUND = 127
EXIT_COMMAND_NOT_EXECUTABLE = 126


def launch_process(
    command: Sequence[str],
    environ: Mapping[str, str],
    exec_fn: ExecFunction = os.execvpe,
) -> NoReturn:
    """Replace the current process with ``command`` running under ``environ``.

    Args:
        command: Executable (looked up on the resolved ``PATH``) and arguments.
        environ: Complete environment for the new process image.
        exec_fn: Process replacement primitive.

    Raises:
        ProcessLaunchError: If the command is empty, not found or not executable.
    """
    if not command:
        raise ProcessLaunchError("no command given to launch")

    program = command[0]
    context = ModelResolverErrorContext(operation="launch", target_name=program)
    logger.debug("launching command %s", program)
    try:
        exec_fn(program, list(command), dict(environ))
    except FileNotFoundError as e:
        raise ProcessLaunchError(
            f"command not found: {program}",
            exit_code=EXIT_COMMAND_NOT_FOUND,
            context=context,
        ) from e
    except PermissionError as e:
        raise ProcessLaunchError(
            f"permission denied: {program}",
            exit_code=EXIT_COMMAND_NOT_EXECUTABLE,
            context=context,
        ) from e
    except OSError as e:
        raise ProcessLaunchError(
            f"failed to launch {program}: {e.strerror or e}",
            context=context,
        ) from e
    # Only reachable with a substituted exec_fn that returns.
    raise ProcessLaunchError(f"{program} returned without replacing the process")


__all__ = [
    "EXIT_COMMAND_NOT_EXECUTABLE",
    "EXIT_COMMAND_NOT_FOUND",
    "launch_process",
]
