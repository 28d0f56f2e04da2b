# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for the command table, usage screen, root guard and argument counts."""

import os

import pytest

from please.cli import COMMANDS, cli

ONE_ARGUMENT_COMMANDS = ["build", "install", "uninstall", "shell", "run-test", "run-vm"]
NO_ARGUMENT_COMMANDS = ["init", "doctor", "completions"]


class TestCommandTable:
    """Every listed command is registered and every registered command is listed."""

    def test_commands_match_registered(self):
        assert set(COMMANDS) == set(cli.commands)

    @pytest.mark.parametrize("command", COMMANDS)
    def test_command_has_help(self, runner, command):
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0, f"Command '{command}' failed: {result.output}"
        assert "Usage:" in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "." in result.output


class TestUsage:
    """Missing or unknown commands print usage and fail."""

    def test_no_command_prints_usage(self, runner, fake_nix):
        result = runner.invoke(cli, [])
        assert result.exit_code == 1
        assert "Usage: please" in result.output
        for command in COMMANDS:
            assert command in result.output
        assert fake_nix.calls == []

    def test_unknown_command_prints_usage(self, runner, fake_nix):
        result = runner.invoke(cli, ["frobnicate", "x"])
        assert result.exit_code == 1
        assert "Unknown command: frobnicate" in result.output
        assert "Usage: please" in result.output
        assert fake_nix.calls == []


class TestRootGuard:
    """Running as root fails before anything is executed."""

    @pytest.mark.parametrize("command", ONE_ARGUMENT_COMMANDS)
    def test_root_refused_for_artifact_commands(
        self, runner, fake_nix, nix_installed, monkeypatch, command
    ):
        monkeypatch.setattr(os, "geteuid", lambda: 0)
        result = runner.invoke(cli, [command, "something"])
        assert result.exit_code != 0
        assert "root" in result.output
        assert fake_nix.calls == []

    @pytest.mark.parametrize("command", NO_ARGUMENT_COMMANDS + ["list"])
    def test_root_refused_for_other_commands(
        self, runner, fake_nix, nix_installed, monkeypatch, command
    ):
        monkeypatch.setattr(os, "geteuid", lambda: 0)
        result = runner.invoke(cli, [command])
        assert result.exit_code != 0
        assert fake_nix.calls == []


class TestArgumentCounts:
    """Wrong positional counts fail before any process is started."""

    @pytest.mark.parametrize("command", ONE_ARGUMENT_COMMANDS)
    @pytest.mark.parametrize("args", [[], ["a", "b"], ["a", "b", "c"]])
    def test_one_argument_commands(self, runner, fake_nix, nix_installed, command, args):
        result = runner.invoke(cli, [command, *args])
        assert result.exit_code == 1
        assert f"{command} expects 1 argument(s), got {len(args)}" in result.output
        assert fake_nix.calls == []

    @pytest.mark.parametrize("command", NO_ARGUMENT_COMMANDS)
    def test_no_argument_commands(self, runner, fake_nix, nix_installed, command):
        result = runner.invoke(cli, [command, "extra"])
        assert result.exit_code == 1
        assert f"{command} expects 0 argument(s), got 1" in result.output
        assert fake_nix.calls == []

    @pytest.mark.parametrize(
        "argv, message",
        [
            (["build", "api", "--keep-going"], "build expects 1 argument(s), got 2"),
            (["run-vm", "-x", "smoke"], "run-vm expects 1 argument(s), got 2"),
            (["doctor", "--verbose"], "doctor expects 0 argument(s), got 1"),
            (["completions", "-v"], "completions expects 0 argument(s), got 1"),
            (["list", "beta", "-v"], "list expects at most 1 argument(s), got 2"),
        ],
    )
    def test_dashed_words_are_counted(self, runner, fake_nix, nix_installed, argv, message):
        result = runner.invoke(cli, argv)
        assert result.exit_code == 1
        assert message in result.output
        assert fake_nix.calls == []

    def test_dashed_artifact_is_passed_through(self, runner, fake_nix, nix_installed):
        result = runner.invoke(cli, ["build", "-weird"])
        assert result.exit_code == 0
        assert ["nix-build", "<contrail>", "-A", "-weird"] in fake_nix.commands

    def test_help_still_works(self, runner, fake_nix):
        result = runner.invoke(cli, ["build", "--help"])
        assert result.exit_code == 0
        assert "ARTIFACT" in result.output
        assert fake_nix.calls == []

    def test_list_takes_at_most_one(self, runner, fake_nix, nix_installed):
        result = runner.invoke(cli, ["list", "a", "b"])
        assert result.exit_code == 1
        assert "list expects at most 1 argument(s), got 2" in result.output
        assert fake_nix.calls == []


class TestCompletions:
    def test_prints_static_script(self, runner, fake_nix):
        result = runner.invoke(cli, ["completions"])
        assert result.exit_code == 0
        assert "complete -F _please_complete please" in result.output
        for command in COMMANDS:
            assert command in result.output
        assert fake_nix.calls == []
