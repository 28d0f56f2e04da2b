# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shell completion script."""

import click

from please.cli import ARGS_CONTEXT, COMMANDS, cli
from please.cli.helpers import bash_completion_script, handle_errors, require_args


@cli.command("completions", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@handle_errors
def completions(args):
    """Print the bash completion script.

    \b
    Enable it for the current shell:
      source <(please completions)
    """
    require_args("completions", args, 0)
    click.echo(bash_completion_script(COMMANDS), nl=False)
