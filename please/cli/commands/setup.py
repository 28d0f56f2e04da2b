# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Environment setup commands: init, doctor."""

import sys

import click
from rich.markup import escape

from please.bootstrap import (
    BootstrapError,
    StepResult,
    cache_config_lines,
    install_nix,
    subscribe_channel,
    write_cache_config,
)
from please.cli import ARGS_CONTEXT, cli
from please.cli.helpers import console, handle_errors, takes_args
from please.doctor import run_checks
from please.environment import PleaseContext
from please.utils.logging import get_logger

logger = get_logger(__name__)


def _report_step(step: StepResult) -> None:
    if step.changed:
        logger.success(step.message)
    else:
        console.print(f"[dim]{escape(step.message)}[/dim]")


@cli.command("init", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@handle_errors
@takes_args(0)
def init(context: PleaseContext):
    """Install Nix, subscribe the channel and configure the binary cache.

    Safe to run repeatedly: steps that are already done are skipped, and an
    existing nix.conf is never overwritten.

    The installer URL can be overridden with PLEASE_NIX_INSTALLER_URL.
    """
    try:
        step = install_nix(context)
        _report_step(step)
        if step.changed:
            context = context.reload()

        _report_step(subscribe_channel(context))

        step = write_cache_config(context)
        _report_step(step)
    except BootstrapError as exc:
        logger.error(str(exc))
        sys.exit(exc.retcode)

    if not step.changed:
        console.print("[yellow]Edit it manually and make sure it contains:[/yellow]")
        for line in cache_config_lines(context):
            console.print(f"  {escape(line)}", soft_wrap=True)


@cli.command("doctor", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@handle_errors
@takes_args(0)
def doctor(context: PleaseContext):
    """Check that Nix, the channel, the binary cache and KVM are ready.

    Exits 1 when an essential check fails. KVM is only advisory.
    """
    report = run_checks(context)
    width = max(len(check.name) for check in report.checks)
    for check in report.checks:
        if check.ok:
            status = "[green]OK[/green]"
        elif check.essential:
            status = "[red]FAIL[/red]"
        else:
            status = "[yellow]FAIL[/yellow]"
        console.print(f"  {escape(check.name.ljust(width))}  {status}", soft_wrap=True)

    console.print()
    for check in report.failures:
        if check.hint:
            label = "[red]✗[/red]" if check.essential else "[yellow]⚠[/yellow]"
            console.print(f"{label} {escape(check.name)}: {escape(check.hint)}", soft_wrap=True)

    if not report.ok:
        console.print("[red]Some essential checks failed.[/red] Run: please init")
        sys.exit(1)

    console.print("[green]Everything looks good.[/green]")
