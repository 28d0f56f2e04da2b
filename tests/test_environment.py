# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for the invocation context."""

import dataclasses

import pytest

from please.environment import PleaseContext, load_profile_env


@pytest.fixture
def profile(isolated_host):
    script = isolated_host / ".nix-profile" / "etc" / "profile.d" / "nix.sh"
    script.parent.mkdir(parents=True)
    script.write_text("export NIX_PATH=contrail=/nix/var/channels/contrail\n")
    return script


def test_missing_profile_exports_nothing(isolated_host, fake_nix):
    assert load_profile_env(isolated_host / "absent.sh", {"PATH": "/bin"}) == {}
    assert fake_nix.calls == []


def test_profile_variables_are_collected(profile, fake_nix):
    fake_nix.respond(
        ["sh", "-c"],
        stdout="PATH=/nix/bin:/bin\0HOME=/home/u\0NIX_PATH=contrail=/x\0",
    )

    exported = load_profile_env(profile, {"PATH": "/bin", "HOME": "/home/u"})

    assert exported == {"PATH": "/nix/bin:/bin", "NIX_PATH": "contrail=/x"}
    call = fake_nix.calls[0]
    assert call.argv[-1] == str(profile)
    assert call.capture


def test_failing_profile_is_ignored(profile, fake_nix):
    fake_nix.respond(["sh", "-c"], retcode=1, stdout="PATH=/broken\0")

    assert load_profile_env(profile, {"PATH": "/bin"}) == {}


def test_context_env_includes_profile_exports(profile, fake_nix):
    fake_nix.respond(["sh", "-c"], stdout="NIX_SSL_CERT_FILE=/etc/ssl/cert.pem\0")

    context = PleaseContext.load(prime=False)

    assert context.env["NIX_SSL_CERT_FILE"] == "/etc/ssl/cert.pem"


def test_context_is_immutable(fake_nix):
    context = PleaseContext.load(prime=False)

    with pytest.raises(dataclasses.FrozenInstanceError):
        context.env = {}
    with pytest.raises(TypeError):
        context.env["FOO"] = "bar"


def test_prime_skipped_without_nix(fake_nix):
    PleaseContext.load()

    assert fake_nix.calls_to("nix-instantiate") == []


def test_prime_failure_is_tolerated(nix_installed, fake_nix):
    fake_nix.respond(["nix-instantiate"], retcode=1, stderr="error: file 'contrail' was not found")

    context = PleaseContext.load()

    assert context.nix_available
    assert fake_nix.commands == [
        ["nix-instantiate", "--eval", "--expr", "builtins.attrNames (import <contrail> {})"]
    ]


def test_run_passes_context_env(nix_installed, fake_nix):
    context = PleaseContext.load(prime=False)

    context.run(["nix-build", "<contrail>", "-A", "x"], extra_env={"QEMU_NET_OPTS": "o"})

    env = fake_nix.calls[0].env
    assert env["QEMU_NET_OPTS"] == "o"
    assert env["PATH"] == str(nix_installed)
    assert "QEMU_NET_OPTS" not in context.env
