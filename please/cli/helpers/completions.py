# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Static bash completion script emitted by ``please completions``.

The script completes subcommand names and, for the commands that take an
artifact, asks ``please list <prefix>`` at completion time.
"""

from typing import Iterable

ARTIFACT_COMMANDS = ("build", "install", "uninstall", "shell")

_BASH_TEMPLATE = """\
# bash completion for please
# Install with:  please completions > ~/.local/share/bash-completion/completions/please

_please_complete() {{
    local cur="${{COMP_WORDS[COMP_CWORD]}}"
    local commands="{commands}"

    if [ "$COMP_CWORD" -eq 1 ]; then
        COMPREPLY=($(compgen -W "$commands" -- "$cur"))
        return 0
    fi

    if [ "$COMP_CWORD" -eq 2 ]; then
        case "${{COMP_WORDS[1]}}" in
            {artifact_commands})
                COMPREPLY=($(compgen -W "$(please list "$cur" 2>/dev/null)" -- "$cur"))
                return 0
                ;;
        esac
    fi

    COMPREPLY=()
}}

complete -F _please_complete please
"""


def bash_completion_script(commands: Iterable[str]) -> str:
    """Render the bash completion script for the given command names."""
    return _BASH_TEMPLATE.format(
        commands=" ".join(commands),
        artifact_commands="|".join(ARTIFACT_COMMANDS),
    )
