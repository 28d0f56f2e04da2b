# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""List the artifacts a channel provides."""

import json
import sys
from typing import Optional

import click

from please import nix
from please.cli import ARGS_CONTEXT, cli
from please.cli.helpers import PleaseError, handle_errors, takes_args
from please.environment import PleaseContext
from please.utils.logging import get_logger

logger = get_logger(__name__)


@cli.command("list", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="[FILTER]")
@handle_errors
@takes_args(1, at_most=True)
def list_command(context: PleaseContext, needle: Optional[str] = None):
    """List attribute paths, optionally only those containing FILTER.

    FILTER is matched as a case-sensitive substring.
    """
    result = context.run(nix.eval_json_cmd(context.config.list_expression), capture=True)
    if not result.ok:
        logger.error(f"Evaluating the attribute list failed: {result.stderr or result.retcode}")
        sys.exit(result.retcode)

    try:
        tree = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise PleaseError(
            f"nix-instantiate returned invalid JSON: {exc}",
            hint="Check list_expression in ~/.config/please/config.yml",
        ) from exc

    for name in nix.filter_names(nix.flatten_attributes(tree), needle):
        click.echo(name)
