# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Invocation context shared by all please commands.

The context is loaded once per invocation: it captures the environment the
Nix tools should run with (our environment plus whatever the Nix profile
script exports) and warms the channel's evaluation cache. Handlers receive
it read-only; ``init`` derives a new one after installing Nix.
"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence

from please import nix
from please.host_config import HostConfig, get_config
from please.utils.logging import get_logger

logger = get_logger(__name__)

# Sources the profile in a child shell and dumps the resulting environment
_PROFILE_DUMP = '. "$1" >/dev/null 2>&1 && env -0'


def load_profile_env(profile: Path, base_env: Mapping[str, str]) -> Dict[str, str]:
    """Return the variables the Nix profile script sets or changes.

    Returns an empty dict when the script is missing or fails to source.
    """
    if not profile.is_file():
        logger.debug(f"No Nix profile at {profile}")
        return {}

    result = nix.run(["sh", "-c", _PROFILE_DUMP, "sh", str(profile)], env=base_env, capture=True)
    if not result.ok:
        logger.debug(f"Sourcing {profile} failed with code {result.retcode}")
        return {}

    exported = {}
    for entry in result.stdout.split("\0"):
        key, sep, value = entry.partition("=")
        if not sep or not key:
            continue
        if base_env.get(key) != value:
            exported[key] = value
    return exported


@dataclass(frozen=True)
class PleaseContext:
    """Immutable per-invocation state passed to every command."""

    config: HostConfig
    env: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def load(cls, config: Optional[HostConfig] = None, prime: bool = True) -> "PleaseContext":
        """Build the context for this invocation.

        Sources the Nix profile (if present) into the context environment and,
        when Nix is available, evaluates the channel index once so later
        queries don't hit a cold cache. Every failure here is tolerated.
        """
        config = config or get_config()
        env = dict(os.environ)
        env.update(load_profile_env(config.nix_profile_script, env))
        context = cls(config=config, env=MappingProxyType(env))
        if prime:
            context.prime()
        return context

    def reload(self) -> "PleaseContext":
        """Return a fresh context, e.g. after Nix was installed."""
        return PleaseContext.load(config=self.config, prime=False)

    def which(self, program: str) -> Optional[str]:
        """Resolve program on the context's PATH."""
        return shutil.which(program, path=self.env.get("PATH", os.defpath))

    @property
    def nix_available(self) -> bool:
        return self.which("nix-env") is not None

    def prime(self) -> None:
        if self.which("nix-instantiate") is None:
            logger.debug("Nix not available, skipping index priming")
            return
        result = self.run(nix.eval_cmd(self.config.prime_expression), capture=True)
        if not result.ok:
            logger.debug(f"Index priming failed (code {result.retcode}), continuing")

    def run(
        self,
        cmd: Sequence[str],
        capture: bool = False,
        extra_env: Optional[Mapping[str, str]] = None,
    ) -> nix.ProcRet:
        """Run cmd with the context environment."""
        env = dict(self.env)
        if extra_env:
            env.update(extra_env)
        return nix.run(cmd, env=env, capture=capture)
