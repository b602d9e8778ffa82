"""Infrastructure layer — external system integration.

This layer wraps all interaction with the filesystem, :mod:`ssl` and
psycopg.  Every raw third-party exception must be caught here and
re-raised as a :class:`~pg_tle_install.exceptions.PgTleInstallError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from pg_tle_install.infra.extension_files import read_extension_package, read_update_script
from pg_tle_install.infra.pgtle_client import (
    PsycopgTleClient,
    describe_conninfo,
    open_tle_client,
)
from pg_tle_install.infra.tls import TlsSettings, build_tls_settings

__all__: list[str] = [
    "PsycopgTleClient",
    "TlsSettings",
    "build_tls_settings",
    "describe_conninfo",
    "open_tle_client",
    "read_extension_package",
    "read_update_script",
]
