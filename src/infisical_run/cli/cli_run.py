# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""infisical-run CLI - run a command with secrets and dotenv variables loaded.

Usage
-----
    infisical-run [options] -- <command> [args...]

    FOO=bar infisical-run -E .env.test -- pytest -x

Everything before the mandatory ``--`` is an option of infisical-run; unknown
options are usage errors (exit 2). Everything after it is the command to run,
passed through verbatim.

Exit Codes
----------
    0    never returned directly; the command replaces this process
    1    resolution failed (missing credentials, project ID, dotenv file,
         secrets client failure); no command is launched
    2    usage error
    126  command is not executable
    127  command not found
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click
from pydantic import SecretStr

from infisical_run import __version__
from infisical_run.enums import EnumSecretsBackend
from infisical_run.errors import EnvResolverError
from infisical_run.models import ModelEnvResolverConfig
from infisical_run.runtime.constants_env import ENV_VERBOSE
from infisical_run.runtime.env_resolver import EnvResolver
from infisical_run.runtime.process_launcher import launch_process

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "infisical_run"
_TARGET_COMMAND_KEY = "infisical_run.target_command"
_MISSING_DELIMITER_MESSAGE = (
    "You MUST use -- to delimit flags to infisical-run from the command to be run."
)


class ClickEchoHandler(logging.Handler):
    """Logging handler writing ``LEVEL: message`` lines to stderr via click.

    Colour is applied with ``click.style`` and stripped by click when stderr
    is not a terminal.
    """

    _LEVEL_COLOURS: dict[int, str] = {
        logging.DEBUG: "cyan",
        logging.INFO: "green",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "red",
    }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            label = click.style(
                record.levelname, fg=self._LEVEL_COLOURS.get(record.levelno)
            )
            click.echo(f"{label}: {self.format(record)}", err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool) -> None:
    """Route package logging to stderr; DEBUG when verbose, WARNING otherwise."""
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(ClickEchoHandler())
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def report_error(message: str) -> None:
    """Write a clearly marked fatal error message to stderr."""
    click.echo(f"{click.style('ERROR', fg='red')}: {message}", err=True)


class DelimitedCommand(click.Command):
    """click command that takes its target command after a literal ``--``.

    The arguments after the first ``--`` are removed before click parses the
    options and stored in ``ctx.meta``. Options are parsed first so that
    ``--help`` and ``--version`` work without a delimiter; any invocation
    that reaches the end of parsing without ``--`` and a command is a usage
    error.
    """

    allow_extra_args = True

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        command: tuple[str, ...] | None = None
        if "--" in args:
            index = args.index("--")
            command = tuple(args[index + 1 :])
            args = args[:index]
        ctx.meta[_TARGET_COMMAND_KEY] = command

        remaining = super().parse_args(ctx, args)
        if ctx.resilient_parsing:
            return remaining

        if command is None:
            raise click.UsageError(_MISSING_DELIMITER_MESSAGE, ctx=ctx)
        if ctx.args:
            raise click.UsageError(
                f"Got unexpected extra arguments ({' '.join(ctx.args)})", ctx=ctx
            )
        if not command:
            raise click.UsageError("no command given after --", ctx=ctx)
        return remaining


@click.command(
    cls=DelimitedCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    options_metavar="[OPTIONS] -- <COMMAND>",
)
@click.option(
    "--client-id",
    "-i",
    metavar="ID",
    help="Infisical client ID ($INFISICAL_CLIENT_ID).",
)
@click.option(
    "--cd",
    "-C",
    "workdir",
    metavar="PATH",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Change directories to PATH before doing anything.",
)
@click.option(
    "--env-file",
    "-E",
    "env_files",
    metavar="PATH",
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Additional dotenv file; may be given multiple times, loaded in order.",
)
@click.option(
    "--environment",
    "-e",
    metavar="ENV",
    help="Infisical project environment ($INFISICAL_ENVIRONMENT).",
)
@click.option(
    "--force-infisical",
    is_flag=True,
    help="Load secrets from Infisical even if already loaded or disabled.",
)
@click.option("--no-default-env-file", is_flag=True, help="Do not load .env.")
@click.option("--no-infisical", is_flag=True, help="Do not load secrets from Infisical.")
@click.option(
    "--no-keep-shell-env",
    is_flag=True,
    help="Give shell environment variables lowest precedence instead of highest.",
)
@click.option(
    "--project-id",
    "-p",
    metavar="ID",
    help="Infisical project ID ($INFISICAL_PROJECT_ID).",
)
@click.option(
    "--secret",
    "-s",
    "client_secret",
    metavar="SECRET",
    help="Infisical client secret ($INFISICAL_CLIENT_SECRET).",
)
@click.option(
    "--token",
    "-t",
    metavar="TOKEN",
    help="Already obtained Infisical access token ($INFISICAL_TOKEN).",
)
@click.option(
    "--backend",
    type=click.Choice([b.value for b in EnumSecretsBackend]),
    default=EnumSecretsBackend.CLI.value,
    show_default=True,
    help="Secrets client: the infisical CLI or the Python SDK.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Print debugging log messages ($VERBOSE).",
)
@click.version_option(
    __version__,
    "--version",
    prog_name="infisical-run",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    client_id: str | None,
    workdir: Path | None,
    env_files: tuple[Path, ...],
    environment: str | None,
    force_infisical: bool,
    no_default_env_file: bool,
    no_infisical: bool,
    no_keep_shell_env: bool,
    project_id: str | None,
    client_secret: str | None,
    token: str | None,
    backend: str,
    verbose: bool,
) -> None:
    """Run a command after loading its environment from Infisical and dotenv files.

    Variables come from four places, highest precedence first: the shell
    session (or the command line of the root command), additional dotenv
    files given with --env-file (later files win), the .env file in the
    current directory, and Infisical.

    \b
        FOO=bar infisical-run -- some-command

    The .env file is loaded before authenticating, so it may hold the
    Infisical credentials, and loaded again after the secrets so that it
    outranks them. If _SECRETS_MANAGER_LOADED or INFISICAL_LOADED is true,
    Infisical is assumed to be loaded already and is skipped;
    --force-infisical overrides this and --no-infisical.

    You MUST use -- to delimit options of infisical-run from the command.
    """
    configure_logging(verbose or bool(os.environ.get(ENV_VERBOSE)))

    command = ctx.meta[_TARGET_COMMAND_KEY]

    if workdir is not None:
        os.chdir(workdir)

    logger.debug("infisical-run %s", __version__)

    config = ModelEnvResolverConfig(
        keep_shell_env=not no_keep_shell_env,
        load_default_dotenv=not no_default_env_file,
        extra_dotenv_files=env_files,
        skip_secrets=no_infisical,
        force_secrets=force_infisical,
        client_id=SecretStr(client_id) if client_id else None,
        client_secret=SecretStr(client_secret) if client_secret else None,
        token=SecretStr(token) if token else None,
        project_id=project_id or None,
        environment=environment or None,
        backend=EnumSecretsBackend(backend),
    )

    try:
        result = EnvResolver(config).resolve(os.environ)
        logger.debug("launching command")
        launch_process(command, result.environment.to_environ())
    except EnvResolverError as exc:
        report_error(exc.message)
        sys.exit(exc.exit_code)


def main() -> None:
    """Entry point for the infisical-run CLI."""
    cli()


__all__ = ["ClickEchoHandler", "DelimitedCommand", "cli", "configure_logging", "main"]
