# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""please - Build, install, test and boot Nix channel artifacts."""

__version__ = "0.2.0"
