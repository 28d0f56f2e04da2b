# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Idempotent bootstrap steps run by ``please init``.

Each step checks first and only acts when something is missing:
- install Nix with the upstream installer script
- subscribe the package channel
- create the user nix.conf with the binary cache (never overwritten)
"""

import os
import tempfile
from dataclasses import dataclass

from please import nix
from please.doctor import is_channel_subscribed
from please.environment import PleaseContext
from please.utils.logging import get_logger

logger = get_logger(__name__)

NIXOS_CACHE_URL = "https://cache.nixos.org"
NIXOS_CACHE_KEY = "cache.nixos.org-1:6NCHdD59X431o0gWypbMrAURkbJ16ZPMQFGspcDShjY="


class BootstrapError(Exception):
    """Raised when an external bootstrap step fails."""

    def __init__(self, message: str, retcode: int):
        super().__init__(message)
        self.retcode = retcode


@dataclass
class StepResult:
    changed: bool
    message: str


def cache_config_lines(ctx: PleaseContext) -> list[str]:
    """nix.conf lines that enable the binary cache."""
    lines = [f"substituters = {NIXOS_CACHE_URL} {ctx.config.cache_url}"]
    keys = [NIXOS_CACHE_KEY]
    if ctx.config.cache_public_key:
        keys.append(ctx.config.cache_public_key)
    lines.append(f"trusted-public-keys = {' '.join(keys)}")
    return lines


def install_nix(ctx: PleaseContext) -> StepResult:
    """Download and run the Nix installer unless Nix is already there."""
    if ctx.nix_available:
        return StepResult(False, "Nix is already installed")

    url = ctx.config.installer_url
    logger.info(f"Installing Nix from {url}")
    fd, script = tempfile.mkstemp(prefix="nix-install-", suffix=".sh")
    os.close(fd)
    try:
        result = ctx.run(["curl", "--fail", "--silent", "--show-error", "--location",
                          "--output", script, url])
        if not result.ok:
            raise BootstrapError(f"Downloading the Nix installer from {url} failed",
                                 result.retcode)
        result = ctx.run(["sh", script])
        if not result.ok:
            raise BootstrapError("The Nix installer failed", result.retcode)
    finally:
        os.unlink(script)
    return StepResult(True, "Nix installed")


def subscribe_channel(ctx: PleaseContext) -> StepResult:
    name = ctx.config.channel_name
    if is_channel_subscribed(ctx):
        return StepResult(False, f"Channel '{name}' is already subscribed")

    logger.info(f"Subscribing channel '{name}' ({ctx.config.channel_url})")
    result = ctx.run(nix.channel_add_cmd(ctx.config.channel_url, name))
    if not result.ok:
        raise BootstrapError(f"Adding channel '{name}' failed", result.retcode)
    result = ctx.run(nix.channel_update_cmd(name))
    if not result.ok:
        raise BootstrapError(f"Updating channel '{name}' failed", result.retcode)
    return StepResult(True, f"Channel '{name}' subscribed")


def write_cache_config(ctx: PleaseContext) -> StepResult:
    """Create nix.conf with the binary cache; an existing file is left alone."""
    conf = ctx.config.nix_conf
    if conf.exists():
        return StepResult(False, f"{conf} already exists, not overwriting it")

    conf.parent.mkdir(parents=True, exist_ok=True)
    conf.write_text("\n".join(cache_config_lines(ctx)) + "\n")
    return StepResult(True, f"Binary cache configured in {conf}")
