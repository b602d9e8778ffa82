"""Allow ``python -m pg_tle_install`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m pg_tle_install`` behaves identically to the
``pg-tle-install`` console script.
"""

from __future__ import annotations

from pg_tle_install.cli.app import cli

if __name__ == "__main__":
    cli()
