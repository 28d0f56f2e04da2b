# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Test commands: run-test, run-vm."""

import sys

import click

from please import nix
from please.cli import ARGS_CONTEXT, cli
from please.cli.helpers import console, handle_errors, run_logged, takes_args
from please.environment import PleaseContext
from please.paths import HostPaths


def _test_attribute(context: PleaseContext, test: str) -> str:
    return f"{context.config.tests_attribute}.{test}"


@cli.command("run-test", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="TEST")
@handle_errors
@takes_args(1)
def run_test(context: PleaseContext, test: str):
    """Run TEST by building it."""
    attr = _test_attribute(context, test)
    sys.exit(run_logged(context, nix.build_cmd(context.config.channel_path, attr)))


@cli.command("run-vm", context_settings=ARGS_CONTEXT)
@click.argument("args", nargs=-1, type=click.UNPROCESSED, metavar="TEST")
@handle_errors
@takes_args(1)
def run_vm(context: PleaseContext, test: str):
    """Boot the VMs of TEST interactively.

    Builds the test driver, then starts the VMs with host ports forwarded
    into the guest (8080, 8143 and 2222 to ssh by default). Stop the VMs
    with Ctrl-C.
    """
    attr = f"{_test_attribute(context, test)}.driver"

    link = HostPaths.vm_link(test)
    link.parent.mkdir(parents=True, exist_ok=True)
    code = run_logged(context, nix.build_cmd(context.config.channel_path, attr, out_link=str(link)))
    if code != 0:
        sys.exit(code)

    forwards = context.config.port_forwards
    for host, guest in forwards:
        console.print(f"[dim]localhost:{host} -> guest:{guest}[/dim]")

    sys.exit(
        run_logged(
            context,
            [str(link / "bin" / "nixos-run-vms")],
            extra_env={"QEMU_NET_OPTS": nix.qemu_net_opts(forwards)},
        )
    )
