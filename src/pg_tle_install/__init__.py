"""pg-tle-install — install trusted-language extensions into PostgreSQL.

Reads an extension's control file and SQL script from disk and submits
them to ``pgtle.install_extension`` over a TLS connection.
"""

from pg_tle_install.version import __version__

__all__: list[str] = ["__version__"]
