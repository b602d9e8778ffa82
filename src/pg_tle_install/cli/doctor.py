"""``pg-tle-install --action doctor`` — environment diagnostics.

Gathers local information and renders a Rich table summarising whether
the runtime environment can install extensions.  No database connection
is opened.

This module lives in the CLI layer; it purely collects and displays
diagnostic data.
"""

from __future__ import annotations

import os
import platform
import sys

from pg_tle_install.cli import exit_codes
from pg_tle_install.cli.console import console
from pg_tle_install.core.models import DEFAULT_CA_FILE
from pg_tle_install.exceptions import TlsConfigError
from pg_tle_install.infra.tls import load_ca_bundle
from pg_tle_install.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _psycopg_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the psycopg row."""
    try:
        import psycopg
    except ImportError:
        return "psycopg", "NOT INSTALLED", "[red]FAIL[/red]"
    return "psycopg", psycopg.__version__, "[green]OK[/green]"


def format_libpq_version(number: int) -> str:
    """Turn libpq's integer version (e.g. ``160002``) into ``16.2``."""
    if number >= 100000:
        return f"{number // 10000}.{number % 10000}"
    return f"{number // 10000}.{number // 100 % 100}.{number % 100}"


def _libpq_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the libpq row."""
    try:
        from psycopg import pq
    except ImportError:
        return "libpq", "unavailable", "[yellow]WARN[/yellow]"
    return "libpq", format_libpq_version(pq.version()), "[green]OK[/green]"


def _ca_bundle_check(ca_file: str) -> tuple[str, str, str]:
    """Return (label, value, status) for the CA bundle row."""
    if not os.path.isfile(ca_file):
        return "CA bundle", f"{ca_file} (missing)", "[yellow]WARN[/yellow]"
    try:
        load_ca_bundle(ca_file)
    except TlsConfigError:
        return "CA bundle", f"{ca_file} (unreadable)", "[yellow]WARN[/yellow]"
    return "CA bundle", ca_file, "[green]OK[/green]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _tool_version_check() -> tuple[str, str, str]:
    return "pg-tle-install", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\npg-tle-install doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<38} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<38} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(ca_file: str = DEFAULT_CA_FILE) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
        A missing CA bundle is only a warning since ``--ca-file`` can
        point elsewhere.
    """
    checks = [
        _tool_version_check(),
        _python_version_check(),
        _psycopg_version_check(),
        _libpq_version_check(),
        _ca_bundle_check(ca_file),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print(
            "Some checks failed." if has_failure else "All checks passed.",
            file=sys.stderr,
        )
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="pg-tle-install doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=16)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, Text(value), status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
