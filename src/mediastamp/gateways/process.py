"""Bounded execution of external command-line tools."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Protocol, Sequence

LOGGER = logging.getLogger(__name__)


class ToolRunner(Protocol):
    def __call__(self, args: Sequence[str], *, timeout: float) -> Optional[str]: ...


def run_tool(args: Sequence[str], *, timeout: float) -> Optional[str]:
    """Run ``args`` and return its trimmed stdout when it exits with status 0.

    Timeouts, missing executables, and non-zero exits are logged and reported
    as ``None`` so a single stuck call cannot hang a whole run.
    """
    command = list(args)
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        LOGGER.warning("Timed out after %ss: %s", timeout, " ".join(command))
        return None
    except OSError as exc:
        LOGGER.warning("Could not run %s: %s", command[0], exc)
        return None

    if completed.returncode != 0:
        LOGGER.debug(
            "%s exited with %s: %s", command[0], completed.returncode, completed.stderr.strip()
        )
        return None
    return completed.stdout.strip()


__all__ = ["ToolRunner", "run_tool"]
