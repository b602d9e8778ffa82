"""Rendering for the ``list`` and ``list-versions`` actions.

Uses a Rich table on stdout when Rich is installed, otherwise a
pipe-separated plain layout similar to ``psql --no-align``.
"""

from __future__ import annotations

from collections.abc import Sequence

from pg_tle_install.cli.console import out
from pg_tle_install.core.models import AvailableExtension, AvailableExtensionVersion

EXTENSION_COLUMNS: tuple[str, ...] = ("Name", "Default version", "Comment")
VERSION_COLUMNS: tuple[str, ...] = (
    "Name",
    "Version",
    "Superuser",
    "Trusted",
    "Relocatable",
    "Schema",
    "Requires",
    "Comment",
)


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, tuple):
        return ", ".join(value)
    return str(value)


def extension_rows(items: Sequence[AvailableExtension]) -> list[tuple[str, ...]]:
    return [
        (_cell(item.name), _cell(item.default_version), _cell(item.comment))
        for item in items
    ]


def version_rows(items: Sequence[AvailableExtensionVersion]) -> list[tuple[str, ...]]:
    return [
        (
            _cell(item.name),
            _cell(item.version),
            _cell(item.superuser),
            _cell(item.trusted),
            _cell(item.relocatable),
            _cell(item.schema),
            _cell(item.requires),
            _cell(item.comment),
        )
        for item in items
    ]


def render_table(title: str, columns: Sequence[str], rows: list[tuple[str, ...]]) -> None:
    """Print *rows* under *columns*, or a notice when there are none."""
    if not rows:
        out.line(f"No pg_tle managed extensions available ({title}).")
        return

    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError:
        out.line("|".join(columns))
        for row in rows:
            out.line("|".join(row))
        out.line(f"({len(rows)} rows)")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan", border_style="dim")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(Text(cell) for cell in row))
    out.print(table)
