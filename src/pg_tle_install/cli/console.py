"""CLI console helpers with optional Rich support.

This module avoids module-level imports of Rich so bootstrap paths
(``--help``, ``--version``) and plain installs keep working when Rich is
not available.

Two consoles are exposed: :data:`console` writes to stderr (errors,
hints, ``doctor``) and :data:`out` writes to stdout (diagnostic lines,
listings).
"""

from __future__ import annotations

import re
import sys
from typing import Any, TextIO

from pg_tle_install.exceptions import EnvironmentError

_MARKUP = re.compile(r"(?<!\\)\[/?[a-z][a-z ]*\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(*, stderr: bool = True) -> Any:
    """Create a Rich console instance targeting stderr or stdout."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr, highlight=False)


def escape(text: str) -> str:
    """Make user-supplied *text* safe to embed in markup."""
    return text.replace("[", "\\[")


def strip_markup(text: str) -> str:
    """Remove simple ``[style]…[/style]`` tags and undo :func:`escape`."""
    return _MARKUP.sub("", text).replace("\\[", "[")


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def __init__(self, *, stderr: bool) -> None:
        self._stderr = stderr

    def _stream(self) -> TextIO:
        return sys.stderr if self._stderr else sys.stdout

    def print(self, *objects: object, markup: bool = True) -> None:
        """Render with Rich when available, else plain print.

        Pass ``markup=False`` for text containing square brackets.
        """
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except EnvironmentError:
            if markup:
                objects = tuple(strip_markup(o) if isinstance(o, str) else o for o in objects)
            print(*objects, file=self._stream())
            return
        rich_console.print(*objects, markup=markup)

    def line(self, text: str) -> None:
        """Write *text* verbatim: no markup, no highlighting, no wrapping."""
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except EnvironmentError:
            print(text, file=self._stream())
            return
        rich_console.print(text, markup=False, soft_wrap=True)


console = _ConsoleProxy(stderr=True)
out = _ConsoleProxy(stderr=False)
