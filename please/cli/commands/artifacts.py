# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Artifact commands: build, install, uninstall, shell.

Each command passes a single attribute path from the channel to the
corresponding Nix tool and exits with that tool's exit code.
"""

import sys

import click

from please import nix
from please.cli import ARGS_CONTEXT, cli
from please.cli.helpers import (
    NameResolutionError,
    handle_errors,
    run_logged,
    takes_args,
)
from please.environment import PleaseContext
from please.utils.logging import get_logger

logger = get_logger(__name__)


@cli.command("build", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="ARTIFACT")
@handle_errors
@takes_args(1)
def build(context: PleaseContext, artifact: str):
    """Build ARTIFACT with nix-build."""
    sys.exit(run_logged(context, nix.build_cmd(context.config.channel_path, artifact)))


@cli.command("install", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="ARTIFACT")
@handle_errors
@takes_args(1)
def install(context: PleaseContext, artifact: str):
    """Install ARTIFACT into your user profile."""
    sys.exit(run_logged(context, nix.install_cmd(context.config.channel_path, artifact)))


@cli.command("uninstall", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="ARTIFACT")
@handle_errors
@takes_args(1)
def uninstall(context: PleaseContext, artifact: str):
    """Remove ARTIFACT from your user profile.

    nix-env removes installed packages by name, so the attribute path is
    resolved to its package name first.
    """
    channel = context.config.channel_path

    query = context.run(nix.query_name_cmd(channel, artifact), capture=True)
    if not query.ok:
        logger.error(f"Could not look up {artifact} in {channel}: {query.stderr or query.retcode}")
        sys.exit(query.retcode)

    name = nix.parse_package_name(query.stdout)
    if not name:
        raise NameResolutionError(
            f"{artifact} does not resolve to a package name in {channel}",
            hint="please list",
        )

    logger.debug(f"{artifact} resolves to {name}")
    sys.exit(run_logged(context, nix.uninstall_cmd(name)))


@cli.command("shell", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="ARTIFACT")
@handle_errors
@takes_args(1)
def shell(context: PleaseContext, artifact: str):
    """Open a nix-shell with the build environment of ARTIFACT."""
    sys.exit(run_logged(context, nix.shell_cmd(context.config.channel_path, artifact)))
