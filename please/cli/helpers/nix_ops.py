# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Running Nix commands on behalf of CLI handlers."""

import shlex
from typing import Mapping, Optional, Sequence

from please.environment import PleaseContext
from please.utils.logging import get_logger

logger = get_logger(__name__)


def run_logged(
    context: PleaseContext,
    cmd: Sequence[str],
    extra_env: Optional[Mapping[str, str]] = None,
) -> int:
    """Log and run an interactive Nix command, returning its exit code."""
    logger.info(f"Running: {shlex.join(cmd)}")
    result = context.run(cmd, extra_env=extra_env)
    if not result.ok:
        logger.error(f"{cmd[0]} exited with code {result.retcode}")
    return result.retcode
