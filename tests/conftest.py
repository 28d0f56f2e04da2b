# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pytest fixtures for please tests.

No test runs Nix: every external command goes through ``please.nix.run``,
which is replaced by a FakeNix that records the argv and answers from
canned responses. HOME and PATH point into a temporary directory, so Nix
looks "not installed" unless a test asks for the ``nix_installed`` fixture.
"""

import os
import tempfile

# Keep the log file out of the real home directory; set before please is imported
os.environ["PLEASE_LOG_FILE"] = os.path.join(
    tempfile.mkdtemp(prefix="please-test-logs-"), "please.log"
)

from dataclasses import dataclass, field  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Dict, List, Tuple  # noqa: E402

import pytest  # noqa: E402
import yaml  # noqa: E402
from click.testing import CliRunner  # noqa: E402

from please import nix  # noqa: E402
from please.host_config import reset_config  # noqa: E402

NIX_PROGRAMS = ["nix", "nix-build", "nix-channel", "nix-env", "nix-instantiate", "nix-shell"]


@dataclass
class FakeCall:
    argv: List[str]
    env: Dict[str, str]
    capture: bool


@dataclass
class FakeNix:
    """Stands in for please.nix.run."""

    calls: List[FakeCall] = field(default_factory=list)
    responses: Dict[Tuple[str, ...], Tuple[int, str, str]] = field(default_factory=dict)

    def respond(self, prefix, retcode=0, stdout="", stderr=""):
        """Answer commands starting with prefix (longest prefix wins)."""
        self.responses[tuple(prefix)] = (retcode, stdout, stderr)

    def __call__(self, cmd, env=None, capture=False):
        argv = list(cmd)
        self.calls.append(FakeCall(argv, dict(env or {}), capture))
        matches = [p for p in self.responses if tuple(argv[: len(p)]) == p]
        retcode, stdout, stderr = (0, "", "")
        if matches:
            retcode, stdout, stderr = self.responses[max(matches, key=len)]
        return nix.ProcRet(retcode, stdout, stderr, " ".join(argv))

    @property
    def commands(self) -> List[List[str]]:
        return [call.argv for call in self.calls]

    def calls_to(self, *prefix) -> List[FakeCall]:
        return [call for call in self.calls if tuple(call.argv[: len(prefix)]) == prefix]


@pytest.fixture(autouse=True)
def isolated_host(tmp_path, monkeypatch):
    """Temporary HOME, empty PATH, non-root user, fresh config."""
    home = tmp_path / "home"
    home.mkdir()
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("PATH", str(bin_dir))
    for var in ("PLEASE_CONFIG", "PLEASE_NIX_INSTALLER_URL", "PLEASE_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(os, "geteuid", lambda: 1000)

    reset_config()
    yield home
    reset_config()


@pytest.fixture(autouse=True)
def fake_nix(monkeypatch):
    """Replace the process seam so no test spawns a real command."""
    fake = FakeNix()
    monkeypatch.setattr(nix, "run", fake)
    return fake


@pytest.fixture
def nix_installed(tmp_path):
    """Put executable Nix stand-ins on PATH so please sees Nix as installed."""
    bin_dir = tmp_path / "bin"
    for program in NIX_PROGRAMS:
        path = bin_dir / program
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(0o755)
    return bin_dir


@pytest.fixture
def write_config(isolated_host):
    """Write ~/.config/please/config.yml and return its path."""

    def _write(data) -> Path:
        config_file = isolated_host / ".config" / "please" / "config.yml"
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                yaml.dump(data, f)
        reset_config()
        return config_file

    return _write


@pytest.fixture
def runner():
    """Click CLI test runner."""
    return CliRunner()
