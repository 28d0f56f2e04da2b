# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Nix command construction and execution.

Every external process please starts goes through :func:`run`. Commands are
built as argv lists and never passed through a shell, so artifact and test
names reach Nix as single arguments whatever characters they contain.
"""

import shlex
import subprocess
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from please.utils.logging import get_logger

logger = get_logger(__name__)

# Exit status used when the executable itself cannot be started (as sh does)
COMMAND_NOT_FOUND = 127


class ProcRet:
    def __init__(self, retcode: int, stdout: str, stderr: str, cmd: str):
        self.retcode = retcode
        self.stdout = stdout
        self.stderr = stderr
        self.cmd = cmd

    @property
    def ok(self) -> bool:
        return self.retcode == 0


def run(
    cmd: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
    capture: bool = False,
) -> ProcRet:
    """Run a command and wait for it.

    Args:
        cmd: argv list
        env: Full environment for the child (None inherits ours)
        capture: Capture stdout/stderr instead of sharing the terminal

    Returns:
        ProcRet with the child's return code (and output when captured)
    """
    cmdline = shlex.join(cmd)
    logger.debug(f"Running command: {cmdline}")
    try:
        proc = subprocess.run(
            list(cmd),
            env=dict(env) if env is not None else None,
            capture_output=capture,
            text=True,
        )
    except FileNotFoundError:
        logger.debug(f"Command not found: {cmd[0]}")
        return ProcRet(COMMAND_NOT_FOUND, "", f"{cmd[0]}: command not found", cmdline)
    except PermissionError:
        logger.debug(f"Command not executable: {cmd[0]}")
        return ProcRet(126, "", f"{cmd[0]}: permission denied", cmdline)

    if proc.returncode != 0:
        logger.debug(f"Command error, code: {proc.returncode}: {cmdline}")
        if capture and proc.stderr:
            logger.debug(f"stderr: {proc.stderr.rstrip()}")

    return ProcRet(
        proc.returncode,
        (proc.stdout or "").rstrip(),
        (proc.stderr or "").rstrip(),
        cmdline,
    )


# =============================================================================
# argv builders
# =============================================================================


def build_cmd(channel: str, attr: str, out_link: Optional[str] = None) -> List[str]:
    cmd = ["nix-build", channel, "-A", attr]
    if out_link:
        cmd += ["--out-link", out_link]
    return cmd


def install_cmd(channel: str, attr: str) -> List[str]:
    return ["nix-env", "--file", channel, "--install", "--attr", attr]


def query_name_cmd(channel: str, attr: str) -> List[str]:
    """Query the package name nix-env uses for an attribute path."""
    return ["nix-env", "--file", channel, "--query", "--available", "--attr", attr]


def uninstall_cmd(name: str) -> List[str]:
    return ["nix-env", "--uninstall", name]


def shell_cmd(channel: str, attr: str) -> List[str]:
    return ["nix-shell", channel, "-A", attr]


def eval_cmd(expr: str) -> List[str]:
    return ["nix-instantiate", "--eval", "--expr", expr]


def eval_json_cmd(expr: str) -> List[str]:
    return ["nix-instantiate", "--eval", "--strict", "--json", "--expr", expr]


def channel_list_cmd() -> List[str]:
    return ["nix-channel", "--list"]


def channel_add_cmd(url: str, name: str) -> List[str]:
    return ["nix-channel", "--add", url, name]


def channel_update_cmd(name: str) -> List[str]:
    return ["nix-channel", "--update", name]


def show_config_cmd() -> List[str]:
    return ["nix", "--extra-experimental-features", "nix-command", "show-config"]


def qemu_net_opts(port_forwards: Iterable[Tuple[int, int]]) -> str:
    """QEMU_NET_OPTS value forwarding host ports to guest ports."""
    return ",".join(f"hostfwd=tcp::{host}-:{guest}" for host, guest in port_forwards)


# =============================================================================
# Output parsing
# =============================================================================


def flatten_attributes(tree: Any, prefix: str = "") -> List[str]:
    """Flatten an evaluated attribute tree into dotted attribute paths.

    Objects recurse with their keys joined by dots, arrays of strings name
    children of the current prefix, and any other value ends a path.
    Order follows the input.
    """
    names: List[str] = []
    if isinstance(tree, dict):
        for key, value in tree.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            names.extend(flatten_attributes(value, path))
    elif isinstance(tree, list):
        for item in tree:
            if isinstance(item, str):
                names.append(f"{prefix}.{item}" if prefix else item)
            else:
                names.extend(flatten_attributes(item, prefix))
    elif prefix:
        names.append(prefix)
    return names


def filter_names(names: Iterable[str], needle: Optional[str]) -> List[str]:
    """Keep names containing needle (case-sensitive), preserving order."""
    if not needle:
        return list(names)
    return [name for name in names if needle in name]


def parse_channels(output: str) -> Dict[str, str]:
    """Parse ``nix-channel --list`` output into {name: url}."""
    channels = {}
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        channels[fields[0]] = fields[1] if len(fields) > 1 else ""
    return channels


def parse_substituters(output: str) -> List[str]:
    """Extract the substituters from ``nix show-config`` output."""
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "substituters":
            return value.split()
    return []


def parse_package_name(output: str) -> str:
    """First field of the first non-empty line of ``nix-env --query`` output."""
    for line in output.splitlines():
        fields = line.split()
        if fields:
            return fields[0]
    return ""
