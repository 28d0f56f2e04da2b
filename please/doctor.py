# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Environment sanity checks reported by ``please doctor``.

Three checks are essential (Nix installed, channel subscribed, binary cache
configured); the KVM check is advisory and never fails the report.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from please import nix
from please.environment import PleaseContext


@dataclass
class CheckResult:
    """Outcome of a single doctor check."""

    name: str
    ok: bool
    essential: bool = True
    hint: Optional[str] = None


@dataclass
class DoctorReport:
    checks: List[CheckResult]

    @property
    def ok(self) -> bool:
        """True iff every essential check passed."""
        return all(check.ok for check in self.checks if check.essential)

    @property
    def failures(self) -> List[CheckResult]:
        return [check for check in self.checks if not check.ok]


def is_nix_installed(ctx: PleaseContext) -> bool:
    return ctx.nix_available


def is_channel_subscribed(ctx: PleaseContext) -> bool:
    """Check whether the configured channel is in ``nix-channel --list``."""
    if not ctx.nix_available:
        return False
    result = ctx.run(nix.channel_list_cmd(), capture=True)
    if not result.ok:
        return False
    return ctx.config.channel_name in nix.parse_channels(result.stdout)


def is_cache_configured(ctx: PleaseContext) -> bool:
    """Check whether Nix lists the binary cache among its substituters."""
    if not ctx.nix_available:
        return False
    result = ctx.run(nix.show_config_cmd(), capture=True)
    if not result.ok:
        return False
    wanted = ctx.config.cache_url.rstrip("/")
    return any(url.rstrip("/") == wanted for url in nix.parse_substituters(result.stdout))


def is_kvm_available(ctx: PleaseContext) -> bool:
    """The KVM device must exist and be readable and writable by us."""
    device = ctx.config.kvm_device
    return device.exists() and os.access(device, os.R_OK | os.W_OK)


def run_checks(ctx: PleaseContext) -> DoctorReport:
    init_hint = "Run 'please init' to fix this"
    kvm = ctx.config.kvm_device
    return DoctorReport(
        checks=[
            CheckResult("Nix installed", is_nix_installed(ctx), hint=init_hint),
            CheckResult(
                f"Channel '{ctx.config.channel_name}' subscribed",
                is_channel_subscribed(ctx),
                hint=init_hint,
            ),
            CheckResult(
                f"Binary cache {ctx.config.cache_url} configured",
                is_cache_configured(ctx),
                hint=init_hint,
            ),
            CheckResult(
                f"KVM available ({kvm})",
                is_kvm_available(ctx),
                essential=False,
                hint=f"VMs will be very slow without read/write access to {kvm}",
            ),
        ]
    )
