"""psycopg backed implementation of :class:`~pg_tle_install.core.protocols.TleClient`.

This module is the **only** place in the codebase that imports
``psycopg``.  All driver exceptions are caught here and re-raised as
typed :class:`~pg_tle_install.exceptions.DatabaseError` subclasses —
nothing raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pg_tle_install.core.models import AvailableExtension, AvailableExtensionVersion
from pg_tle_install.exceptions import (
    ConnectionFailedError,
    EnvironmentError,
    RemoteExecutionError,
)
from pg_tle_install.infra.tls import TlsSettings

DEFAULT_INSTALL_PROCEDURE = "pgtle.install_extension"

_PROCEDURE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_\$]*(\.[A-Za-z_][A-Za-z0-9_\$]*)?$")

UPDATE_PATH_SQL = "SELECT pgtle.install_update_path(%s, %s, %s, %s)"
UNINSTALL_SQL = "SELECT pgtle.uninstall_extension(%s)"
AVAILABLE_EXTENSIONS_SQL = (
    "SELECT name, default_version, comment FROM pgtle.available_extensions()"
)
AVAILABLE_VERSIONS_SQL = (
    "SELECT name, version, superuser, trusted, relocatable, schema, requires, comment"
    " FROM pgtle.available_extension_versions()"
)


def procedure_name(value: str) -> str:
    """Accept ``name`` or ``schema.name`` made of plain SQL identifiers.

    Raises :class:`ValueError` otherwise, so argparse can use it as a
    ``type=`` converter.
    """
    if not _PROCEDURE_NAME.match(value):
        raise ValueError(f"not a plain [schema.]function name: {value!r}")
    return value


def install_sql(procedure: str = DEFAULT_INSTALL_PROCEDURE) -> str:
    """Return the five-placeholder call to *procedure*."""
    return f"SELECT {procedure_name(procedure)}(%s, %s, %s, %s, %s)"


INSTALL_SQL = install_sql()


def import_psycopg() -> Any:
    """Return the ``psycopg`` module or raise :class:`EnvironmentError`."""
    try:
        import psycopg
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "psycopg is not installed. Install with: pip install 'psycopg[binary]'",
        ) from exc
    return psycopg


def describe_conninfo(conninfo: str) -> str:
    """Render *conninfo* for display with any password removed.

    Strings libpq cannot parse are shown as given; the connection attempt
    reports the real problem later.
    """
    psycopg = import_psycopg()
    try:
        params = psycopg.conninfo.conninfo_to_dict(conninfo)
    except psycopg.Error:
        return conninfo
    if "password" in params:
        params["password"] = "********"
    return " ".join(f"{key}={value}" for key, value in params.items())


class PsycopgTleClient:
    """Concrete :class:`TleClient` bound to one open psycopg connection.

    Usage::

        with open_tle_client(conninfo, tls) as client:
            client.install_extension("myext", "1.0", control, False, script)
    """

    def __init__(
        self,
        conn: Any,
        driver: Any,
        *,
        install_procedure: str = DEFAULT_INSTALL_PROCEDURE,
    ) -> None:
        self._conn = conn
        self._driver = driver
        self._install_sql = install_sql(install_procedure)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def install_extension(
        self,
        name: str,
        version: str,
        control: str,
        flag: bool,
        script: str,
    ) -> None:
        self._execute(self._install_sql, (name, version, control, flag, script))

    def install_update_path(
        self,
        name: str,
        from_version: str,
        to_version: str,
        script: str,
    ) -> bool:
        row = self._execute(UPDATE_PATH_SQL, (name, from_version, to_version, script)).fetchone()
        return bool(row[0]) if row else False

    def uninstall_extension(self, name: str) -> bool:
        row = self._execute(UNINSTALL_SQL, (name,)).fetchone()
        return bool(row[0]) if row else False

    def available_extensions(self) -> tuple[AvailableExtension, ...]:
        rows = self._execute(AVAILABLE_EXTENSIONS_SQL).fetchall()
        return tuple(
            AvailableExtension(name=name, default_version=default_version, comment=comment)
            for name, default_version, comment in rows
        )

    def available_extension_versions(self) -> tuple[AvailableExtensionVersion, ...]:
        rows = self._execute(AVAILABLE_VERSIONS_SQL).fetchall()
        return tuple(
            AvailableExtensionVersion(
                name=name,
                version=version,
                superuser=superuser,
                trusted=trusted,
                relocatable=relocatable,
                schema=schema,
                requires=tuple(requires or ()),
                comment=comment,
            )
            for name, version, superuser, trusted, relocatable, schema, requires, comment
            in rows
        )

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    def _execute(self, query: str, params: tuple[Any, ...] | None = None) -> Any:
        try:
            return self._conn.execute(query, params)
        except self._driver.Error as exc:
            raise _remote_error(exc) from exc


def _remote_error(exc: Exception) -> RemoteExecutionError:
    """Build a :class:`RemoteExecutionError` carrying the server text verbatim."""
    diag = getattr(exc, "diag", None)
    hint = getattr(diag, "message_hint", None)
    return RemoteExecutionError(str(exc).strip() or type(exc).__name__, hint=hint)


@contextmanager
def open_tle_client(
    conninfo: str,
    tls: TlsSettings,
    *,
    install_procedure: str = DEFAULT_INSTALL_PROCEDURE,
) -> Iterator[PsycopgTleClient]:
    """Open one TLS connection and yield a client bound to it.

    The transaction is committed when the block exits cleanly and rolled
    back otherwise; the connection is always closed.

    Raises
    ------
    ConnectionFailedError
        When psycopg cannot establish the session.
    RemoteExecutionError
        When a call inside the block, or the final commit, fails.
    """
    psycopg = import_psycopg()

    try:
        conn = psycopg.connect(conninfo, **tls.libpq_params())
    except psycopg.Error as exc:
        raise ConnectionFailedError(
            f"Cannot connect to PostgreSQL: {str(exc).strip()}",
            hint="Check --pgconn and that the server certificate chains to --ca-file.",
        ) from exc

    try:
        with conn:
            yield PsycopgTleClient(conn, psycopg, install_procedure=install_procedure)
    except psycopg.Error as exc:
        raise _remote_error(exc) from exc
