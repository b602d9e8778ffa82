"""CLI application entry point and action routing for pg-tle-install.

This module is the **sole error boundary** for the entire application.
It catches :class:`~pg_tle_install.exceptions.PgTleInstallError`,
``KeyboardInterrupt`` and any unexpected ``Exception``, renders a short
message, and maps each error category to its exit code.

Architecture notes
------------------
* No business logic lives here — work is delegated to the core service
  and the infrastructure adapters.
* Output goes through :mod:`pg_tle_install.cli.console` only.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from functools import partial
from typing import TYPE_CHECKING

from pg_tle_install.cli import exit_codes
from pg_tle_install.cli.console import console, escape, out
from pg_tle_install.core.models import DEFAULT_CA_FILE, InstallRequest, UpdatePathRequest
from pg_tle_install.exceptions import (
    DatabaseError,
    ExtensionFileError,
    PgTleInstallError,
    TlsConfigError,
)
from pg_tle_install.infra.pgtle_client import DEFAULT_INSTALL_PROCEDURE, procedure_name
from pg_tle_install.version import __version__

if TYPE_CHECKING:  # pragma: no cover
    from pg_tle_install.core.extension_service import ExtensionService

ACTIONS: tuple[str, ...] = (
    "install",
    "install-update-path",
    "uninstall",
    "list",
    "list-versions",
    "doctor",
)

UPDATE_RANGE_SEPARATOR = "--"

_REQUIRED: dict[str, tuple[str, ...]] = {
    "install": ("pg_conn", "ext_path", "ext_name", "ext_rev"),
    "install-update-path": ("pg_conn", "ext_path", "ext_name", "ext_rev"),
    "uninstall": ("pg_conn", "ext_name"),
    "list": ("pg_conn",),
    "list-versions": ("pg_conn",),
    "doctor": (),
}

_FLAGS: dict[str, str] = {
    "pg_conn": "--pgconn",
    "ext_path": "--extpath",
    "ext_name": "--extname",
    "ext_rev": "--extrev",
}

_EXIT_CODES: tuple[tuple[type[PgTleInstallError], int], ...] = (
    (ExtensionFileError, exit_codes.EXTENSION_FILE_ERROR),
    (TlsConfigError, exit_codes.TLS_CONFIG_ERROR),
    (DatabaseError, exit_codes.DATABASE_ERROR),
)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Flags are checked per action after parsing, so ``--action list``
    does not demand ``--extpath``.
    """
    parser = argparse.ArgumentParser(
        prog="pg-tle-install",
        description="Install a trusted-language extension into PostgreSQL using pg_tle.",
        epilog=(
            "TLS: the server certificate must chain to --ca-file, but the "
            "server host name is NOT verified against the certificate."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c",
        "--pgconn",
        dest="pg_conn",
        metavar="PG_CONNECTION",
        help="PostgreSQL connection string (Key=Value or URI format)",
    )
    parser.add_argument(
        "-p",
        "--extpath",
        dest="ext_path",
        metavar="EXTENSION_PATH",
        help="Local path of the extension",
    )
    parser.add_argument(
        "-n",
        "--extname",
        dest="ext_name",
        metavar="EXTENSION_NAME",
        help="Name of the extension",
    )
    parser.add_argument(
        "-r",
        "--extrev",
        dest="ext_rev",
        metavar="EXTENSION_REVISION",
        help="Extension revision to install (FROM--TO for install-update-path)",
    )
    parser.add_argument(
        "-a",
        "--ca-file",
        dest="ca_file",
        default=DEFAULT_CA_FILE,
        help=f"CA PEM bundle (default: {DEFAULT_CA_FILE})",
    )
    parser.add_argument(
        "-A",
        "--action",
        choices=ACTIONS,
        default="install",
        help="Action to perform (default: install)",
    )
    parser.add_argument(
        "-P",
        "--procedure",
        type=procedure_name,
        default=DEFAULT_INSTALL_PROCEDURE,
        help=f"Install function to call (default: {DEFAULT_INSTALL_PROCEDURE})",
    )
    return parser


def _check_required(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Exit with usage if a flag required by the chosen action is missing."""
    missing = [_FLAGS[name] for name in _REQUIRED[args.action] if getattr(args, name) is None]
    if missing:
        parser.error(
            f"the following arguments are required for {args.action}: {', '.join(missing)}"
        )
    if args.action == "install-update-path" and UPDATE_RANGE_SEPARATOR not in args.ext_rev:
        parser.error(f"--extrev must be FROM--TO for install-update-path, got {args.ext_rev!r}")


def split_update_range(ext_rev: str) -> tuple[str, str]:
    """Split ``FROM--TO`` at the first separator."""
    from_rev, _, to_rev = ext_rev.partition(UPDATE_RANGE_SEPARATOR)
    return from_rev, to_rev


# ---------------------------------------------------------------------------
# Action dispatch
# ---------------------------------------------------------------------------

def _build_service(
    pg_conn: str,
    ca_file: str,
    install_procedure: str = DEFAULT_INSTALL_PROCEDURE,
) -> ExtensionService:
    """Wire infra adapters into an :class:`ExtensionService`.

    The CA bundle is validated here, before any file or network I/O.
    """
    from pg_tle_install.core.extension_service import ExtensionService
    from pg_tle_install.infra.extension_files import (
        read_extension_package,
        read_update_script,
    )
    from pg_tle_install.infra.pgtle_client import open_tle_client
    from pg_tle_install.infra.tls import build_tls_settings

    tls = build_tls_settings(ca_file)
    connect = partial(open_tle_client, pg_conn, tls, install_procedure=install_procedure)
    return ExtensionService(read_extension_package, connect, script_reader=read_update_script)


def _connection_target(pg_conn: str) -> str:
    from pg_tle_install.infra.pgtle_client import describe_conninfo

    return describe_conninfo(pg_conn)


def _handle_install(
    request: InstallRequest,
    install_procedure: str = DEFAULT_INSTALL_PROCEDURE,
) -> int:
    """Install one extension revision.

    Flow:
    1. Resolve and print the file paths and connection target.
    2. Validate the CA bundle.
    3. Read the control file, then the SQL script.
    4. Connect and call the install function (``pgtle.install_extension``).
    """
    files = request.files
    out.line(
        f"Loading {request.ext_name} version {request.ext_rev} from {request.ext_path} "
        f"using {_connection_target(request.pg_conn)}"
    )
    out.line(f"cntrl_file is {files.control}")
    out.line(f"func_file is {files.script}")

    service = _build_service(request.pg_conn, request.ca_file, install_procedure)
    service.install(request)
    return exit_codes.SUCCESS


def _handle_install_update_path(request: UpdatePathRequest) -> int:
    """Install one update script (``pgtle.install_update_path``)."""
    out.line(
        f"Loading {request.ext_name} update path {request.from_rev} to {request.to_rev} "
        f"from {request.ext_path} using {_connection_target(request.pg_conn)}"
    )
    out.line(f"func_file is {request.script}")

    service = _build_service(request.pg_conn, request.ca_file)
    if not service.install_update_path(request):
        console.print(
            f"[yellow]Update path {escape(request.from_rev)} to "
            f"{escape(request.to_rev)} was not installed.[/yellow]"
        )
        return exit_codes.GENERAL_ERROR
    return exit_codes.SUCCESS


def _handle_uninstall(pg_conn: str, ca_file: str, ext_name: str) -> int:
    out.line(f"Removing {ext_name} from {_connection_target(pg_conn)}")
    service = _build_service(pg_conn, ca_file)
    if not service.uninstall(ext_name):
        console.print(f"[yellow]{escape(ext_name)} was not removed.[/yellow]")
        return exit_codes.GENERAL_ERROR
    return exit_codes.SUCCESS


def _handle_list(pg_conn: str, ca_file: str, *, versions: bool) -> int:
    from pg_tle_install.cli.listing import (
        EXTENSION_COLUMNS,
        VERSION_COLUMNS,
        extension_rows,
        render_table,
        version_rows,
    )

    target = _connection_target(pg_conn)
    out.line(f"List pg_tle installed extension(s) from {target}")
    service = _build_service(pg_conn, ca_file)
    if versions:
        render_table(target, VERSION_COLUMNS, version_rows(service.list_extension_versions()))
    else:
        render_table(target, EXTENSION_COLUMNS, extension_rows(service.list_extensions()))
    return exit_codes.SUCCESS


def _handle_doctor(ca_file: str) -> int:
    """Dispatch the ``doctor`` diagnostics action."""
    from pg_tle_install.cli.doctor import run_doctor

    return run_doctor(ca_file)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the pg-tle-install CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _check_required(parser, args)

    if args.action == "doctor":
        return _handle_doctor(args.ca_file)
    if args.action == "uninstall":
        return _handle_uninstall(args.pg_conn, args.ca_file, args.ext_name)
    if args.action in ("list", "list-versions"):
        return _handle_list(args.pg_conn, args.ca_file, versions=args.action == "list-versions")
    if args.action == "install-update-path":
        from_rev, to_rev = split_update_range(args.ext_rev)
        return _handle_install_update_path(
            UpdatePathRequest(
                pg_conn=args.pg_conn,
                ext_path=args.ext_path,
                ext_name=args.ext_name,
                from_rev=from_rev,
                to_rev=to_rev,
                ca_file=args.ca_file,
            )
        )

    return _handle_install(
        InstallRequest(
            pg_conn=args.pg_conn,
            ext_path=args.ext_path,
            ext_name=args.ext_name,
            ext_rev=args.ext_rev,
            ca_file=args.ca_file,
        ),
        args.procedure,
    )


def exit_code_for(exc: PgTleInstallError) -> int:
    """Map an error category to its process exit code."""
    for error_type, code in _EXIT_CODES:
        if isinstance(exc, error_type):
            return code
    return exit_codes.GENERAL_ERROR


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except PgTleInstallError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
