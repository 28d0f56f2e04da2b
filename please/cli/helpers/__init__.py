# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared helpers for the please CLI.

- utils.py: Errors, error panels, argument validation
- completions.py: Static shell completion script
- nix_ops.py: Logged execution of Nix commands

All functions are re-exported here for convenience.
"""

from rich.console import Console

console = Console()

from please.cli.helpers.utils import (  # noqa: E402
    ArgumentCountError,
    NameResolutionError,
    PleaseError,
    RootUserError,
    handle_errors,
    require_args,
    require_args_at_most,
    require_unprivileged,
    show_error_panel,
    takes_args,
)

from please.cli.helpers.completions import (  # noqa: E402
    ARTIFACT_COMMANDS,
    bash_completion_script,
)

from please.cli.helpers.nix_ops import run_logged  # noqa: E402

__all__ = [
    "console",
    # Errors
    "ArgumentCountError",
    "NameResolutionError",
    "PleaseError",
    "RootUserError",
    "handle_errors",
    "show_error_panel",
    # Validation
    "require_args",
    "require_args_at_most",
    "require_unprivileged",
    "takes_args",
    # Completions
    "ARTIFACT_COMMANDS",
    "bash_completion_script",
    # Nix
    "run_logged",
]
