# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Error handling and validation helpers for CLI commands."""

import functools
import os
import sys
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from please.environment import PleaseContext

_console = Console()


class PleaseError(Exception):
    """Base class for errors reported to the operator.

    This exception bubbles up to handle_errors which formats it nicely.
    """

    title = "Error"

    def __init__(self, message: str, hint: str = None):
        super().__init__(message)
        self.hint = hint


class RootUserError(PleaseError):
    """Raised when please is run by root."""

    title = "Refusing To Run As Root"

    def __init__(self):
        super().__init__(
            "please drives Nix as an ordinary user; running it as root could "
            "damage the system-wide Nix store and profiles.",
            hint="Run please again from your normal user account",
        )


class ArgumentCountError(PleaseError):
    """Raised when a command gets the wrong number of positional arguments."""

    title = "Wrong Number Of Arguments"

    def __init__(self, command: str, expected: int, actual: int, at_most: bool = False):
        self.command = command
        self.expected = expected
        self.actual = actual
        quantity = f"at most {expected}" if at_most else str(expected)
        super().__init__(
            f"{command} expects {quantity} argument(s), got {actual}",
            hint=f"please {command} --help",
        )


class NameResolutionError(PleaseError):
    """Raised when an attribute path doesn't resolve to an installed name."""

    title = "Unknown Package"


def require_args(command: str, args: Sequence[str], expected: int) -> None:
    """Fail fast unless exactly ``expected`` positional arguments were given."""
    if len(args) != expected:
        raise ArgumentCountError(command, expected, len(args))


def require_args_at_most(command: str, args: Sequence[str], limit: int) -> None:
    if len(args) > limit:
        raise ArgumentCountError(command, limit, len(args), at_most=True)


def takes_args(expected: int, at_most: bool = False) -> Callable:
    """Validate the positional argument count, then load the PleaseContext.

    The wrapped handler is called as ``func(context, *args)``. Validation
    runs before the context is loaded, so a bad invocation never reaches Nix.

    Usage:
        @cli.command("build")
        @click.argument("args", nargs=-1)
        @handle_errors
        @takes_args(1)
        def build(context, artifact):
            ...
    """
    import click

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(args: Sequence[str]):
            command = click.get_current_context().info_name
            if at_most:
                require_args_at_most(command, args, expected)
            else:
                require_args(command, args, expected)
            return func(PleaseContext.load(), *args)

        return wrapper

    return decorator


def require_unprivileged() -> None:
    """Refuse to continue when the effective user is root."""
    if os.geteuid() == 0:
        raise RootUserError()


def show_error_panel(title: str, message: str, hint: str = None) -> None:
    """Display a formatted error panel.

    Args:
        title: Panel title (shown in red)
        message: Main error message
        hint: Optional hint text (shown with blue "Hint:" prefix)
    """
    content = escape(message)
    if hint:
        content += f"\n\n[blue]Hint:[/blue] {escape(hint)}"
    _console.print(Panel(content, title=f"[red]{title}[/red]", border_style="red"))


def handle_errors(func: Callable) -> Callable:
    """Decorator that wraps CLI commands with standard error handling.

    Catches exceptions, prints error with nice formatting, and exits with code 1.
    - PleaseError: panel titled after the error class, with hint if provided
    - ClickException / SystemExit: passed through
    - Other exceptions: generic error panel

    Usage:
        @cli.command()
        @handle_errors
        def my_command():
            ...
    """
    import click

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except (click.exceptions.Exit, click.Abort, click.ClickException):
            raise
        except PleaseError as exc:
            show_error_panel(exc.title, str(exc), exc.hint)
            sys.exit(1)
        except Exception as exc:
            show_error_panel("Error", str(exc))
            sys.exit(1)

    return wrapper
