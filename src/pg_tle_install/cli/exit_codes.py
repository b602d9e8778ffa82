"""Exit-code constants used by the CLI layer.

Each error category gets its own value so scripts can tell a missing
file from a database failure.  Anything nonzero means the action did
not complete.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — action completed without error."""

GENERAL_ERROR: int = 1
"""A PgTleInstallError without a more specific category was caught."""

USAGE_ERROR: int = 2
"""Missing or invalid command-line arguments.  Matches argparse."""

EXTENSION_FILE_ERROR: int = 3
"""The control file or SQL script could not be read."""

DATABASE_ERROR: int = 4
"""Connecting to PostgreSQL or executing the pg_tle call failed."""

TLS_CONFIG_ERROR: int = 5
"""The CA bundle could not be loaded."""

UNEXPECTED_ERROR: int = 70
"""An unhandled exception escaped all known error boundaries (EX_SOFTWARE)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
