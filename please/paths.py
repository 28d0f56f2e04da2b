# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized path definitions for please.

Paths are resolved lazily so that tests (and operators) can redirect
``HOME`` or ``PLEASE_CONFIG`` before the first lookup.

Usage:
    from please.paths import HostPaths

    config_file = HostPaths.config_file()
    nix_conf = HostPaths.nix_conf()
"""

import os
from pathlib import Path


class HostPaths:
    """Paths on the host machine where please runs."""

    # XDG config directory for please
    @staticmethod
    def config_dir() -> Path:
        """~/.config/please/"""
        return Path.home() / ".config" / "please"

    @staticmethod
    def config_file() -> Path:
        """~/.config/please/config.yml, or $PLEASE_CONFIG when set."""
        override = os.environ.get("PLEASE_CONFIG")
        if override:
            return Path(override).expanduser()
        return HostPaths.config_dir() / "config.yml"

    # XDG data directory
    @staticmethod
    def data_dir() -> Path:
        """~/.local/share/please/"""
        return Path.home() / ".local" / "share" / "please"

    @staticmethod
    def log_dir() -> Path:
        """~/.local/share/please/logs/"""
        return HostPaths.data_dir() / "logs"

    @staticmethod
    def vm_link(test: str) -> Path:
        """~/.local/share/please/vms/<test> - nix-build out link for a VM driver."""
        safe = "".join(ch if ch.isalnum() or ch in ("-", "_", ".") else "-" for ch in test)
        return HostPaths.data_dir() / "vms" / (safe.strip(".") or "vm")

    # Nix
    @staticmethod
    def nix_profile_script() -> Path:
        """~/.nix-profile/etc/profile.d/nix.sh"""
        return Path.home() / ".nix-profile" / "etc" / "profile.d" / "nix.sh"

    @staticmethod
    def nix_conf() -> Path:
        """~/.config/nix/nix.conf - user-scoped Nix configuration."""
        return Path.home() / ".config" / "nix" / "nix.conf"

    KVM_DEVICE = "/dev/kvm"
