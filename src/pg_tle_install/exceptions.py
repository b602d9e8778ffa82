"""Custom exception hierarchy for pg-tle-install.

All exceptions that cross layer boundaries must inherit from
:class:`PgTleInstallError`.  Raw third-party exceptions (psycopg, ``ssl``,
``OSError``) must never propagate beyond the infrastructure layer — they
are caught there and re-raised as a typed subclass defined here.

Hierarchy
---------
PgTleInstallError
├── ExtensionFileError
├── TlsConfigError
├── DatabaseError
│   ├── ConnectionFailedError
│   └── RemoteExecutionError
└── EnvironmentError
"""

from __future__ import annotations


class PgTleInstallError(Exception):
    """Base exception for all pg-tle-install errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    and pick the matching exit code.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Local files -----------------------------------------------------------

class ExtensionFileError(PgTleInstallError):
    """Raised when an extension file cannot be read or decoded."""


# --- TLS -------------------------------------------------------------------

class TlsConfigError(PgTleInstallError):
    """Raised when the CA bundle cannot be loaded."""


# --- Database --------------------------------------------------------------

class DatabaseError(PgTleInstallError):
    """Base class for failures talking to the target database."""


class ConnectionFailedError(DatabaseError):
    """Raised when the database session cannot be established."""


class RemoteExecutionError(DatabaseError):
    """Raised when a pg_tle procedure call fails on the server."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(PgTleInstallError):
    """Raised when a required runtime dependency is not available."""
