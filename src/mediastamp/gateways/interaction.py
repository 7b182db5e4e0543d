"""Operator prompt and preview window control."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from .base import PreviewController
from .process import ToolRunner, run_tool

LOGGER = logging.getLogger(__name__)


class ConsolePrompt:
    """Ask on the terminal until one of the allowed answers is typed."""

    def choose(self, message: str, options: Sequence[str]) -> str:
        addendum = f"Please select one of ({', '.join(options)})"
        return click.prompt(
            f"{message.strip()}\n{addendum}",
            type=click.Choice(list(options)),
            show_choices=False,
        )


class MacPreviewController:
    """Open files in a macOS viewer application while the operator decides."""

    def __init__(self, app: str, *, timeout: float, runner: ToolRunner = run_tool) -> None:
        self.app = app
        self.timeout = timeout
        self._runner = runner

    def open(self, path: Path) -> None:
        self._call(["open", "-a", self.app, str(path)])

    def close_window(self) -> None:
        self._call(["osascript", "-e", f'tell application "{self.app}" to close first window'])

    def quit(self) -> None:
        self._call(["osascript", "-e", f'quit app "{self.app}"'])

    def _call(self, args: list[str]) -> None:
        if self._runner(args, timeout=self.timeout) is None:
            LOGGER.warning("Preview command failed: %s", " ".join(args))


class NullPreviewController:
    """Preview controller used when no viewer is configured."""

    def open(self, path: Path) -> None:
        LOGGER.debug("No preview application configured for %s", path)

    def close_window(self) -> None:
        return None

    def quit(self) -> None:
        return None


def build_preview(app: Optional[str], *, timeout: float) -> PreviewController:
    """Return a macOS controller for ``app`` or a no-op controller elsewhere."""
    if app and sys.platform == "darwin":
        return MacPreviewController(app, timeout=timeout)
    return NullPreviewController()


__all__ = ["ConsolePrompt", "MacPreviewController", "NullPreviewController", "build_preview"]
