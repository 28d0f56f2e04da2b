# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""please CLI package."""

import click

from please import __version__
from please.cli.helpers import handle_errors, require_unprivileged
from please.utils.logging import enable_debug, log_startup_info

# Every command, grouped for the usage screen: (name, arguments, description)
COMMAND_GROUPS = [
    (
        "Artifacts",
        [
            ("build", "<artifact>", "Build an artifact"),
            ("install", "<artifact>", "Install an artifact into your profile"),
            ("uninstall", "<artifact>", "Remove an installed artifact"),
            ("shell", "<artifact>", "Open a development shell for an artifact"),
            ("list", "[filter]", "List available artifacts"),
        ],
    ),
    (
        "Tests",
        [
            ("run-test", "<test>", "Run a test"),
            ("run-vm", "<test>", "Boot the VMs of a test interactively"),
        ],
    ),
    (
        "Setup",
        [
            ("init", "", "Install Nix, subscribe the channel, configure the cache"),
            ("doctor", "", "Check that the environment is ready"),
            ("completions", "", "Print the bash completion script"),
        ],
    ),
]

COMMANDS = tuple(name for _, rows in COMMAND_GROUPS for name, _, _ in rows)

# Commands collect every word after their name, dashes included, and count them
ARGS_CONTEXT = {"ignore_unknown_options": True}


def print_usage() -> None:
    click.echo("Usage: please [OPTIONS] COMMAND [ARGS]...\n")

    def _print_table(title: str, rows: list[tuple[str, str, str]], width: int) -> None:
        click.echo(f"{title}:")
        for name, args, desc in rows:
            click.echo(f"  {f'{name} {args}'.strip().ljust(width)}  {desc}")
        click.echo("")

    width = max(len(f"{name} {args}".strip()) for _, rows in COMMAND_GROUPS for name, args, _ in rows)
    for title, rows in COMMAND_GROUPS:
        _print_table(title, rows, width)
    click.echo("Use --help for full command details.")


class PleaseGroup(click.Group):
    """Command group that answers unknown commands with the usage screen."""

    def resolve_command(self, ctx, args):
        cmd_name = click.utils.make_str(args[0])
        if self.get_command(ctx, cmd_name) is None:
            click.echo(f"Unknown command: {cmd_name}\n")
            print_usage()
            ctx.exit(1)
        return super().resolve_command(ctx, args)


@click.group(cls=PleaseGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="please")
@click.option("--debug", is_flag=True, help="Show debug output")
@click.pass_context
@handle_errors
def cli(ctx, debug):
    """please - Build, install, test and boot Nix channel artifacts."""
    if ctx.invoked_subcommand is None:
        print_usage()
        ctx.exit(1)

    if debug:
        enable_debug()

    require_unprivileged()


def main():
    """Main entry point."""
    log_startup_info()
    cli()


from please.cli.commands import artifacts  # noqa: E402,F401
from please.cli.commands import catalog  # noqa: E402,F401
from please.cli.commands import completions  # noqa: E402,F401
from please.cli.commands import setup  # noqa: E402,F401
from please.cli.commands import testing  # noqa: E402,F401
