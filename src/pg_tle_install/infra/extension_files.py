"""Infrastructure: reading TLE package files from local disk.

Rules
-----
* Files are decoded as UTF-8 without newline translation so the server
  receives exactly what is on disk.
* Every ``OSError`` and decode failure is re-raised as
  :class:`~pg_tle_install.exceptions.ExtensionFileError`.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

from pathlib import Path

from pg_tle_install.core.models import ExtensionFiles, ExtensionPackage
from pg_tle_install.exceptions import ExtensionFileError


def read_text_exact(path: Path, *, label: str) -> str:
    """Return the contents of *path* decoded as UTF-8, byte for byte.

    ``Path.read_text`` would translate ``\\r\\n``; reading bytes first
    keeps line endings and a missing trailing newline intact.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise ExtensionFileError(
            f"Cannot read {label} {path}: {reason}",
            hint="Check --extpath, --extname and --extrev.",
        ) from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ExtensionFileError(
            f"Cannot decode {label} {path} as UTF-8: {exc.reason}",
        ) from exc


def read_extension_package(files: ExtensionFiles) -> ExtensionPackage:
    """Read the control file, then the SQL script.

    Satisfies :class:`~pg_tle_install.core.protocols.PackageReader`.
    The script is not touched if the control file fails.
    """
    control = read_text_exact(files.control, label="control file")
    script = read_text_exact(files.script, label="SQL script")
    return ExtensionPackage(control=control, script=script)


def read_update_script(path: Path) -> str:
    """Read one ``{name}--{from}--{to}.sql`` update script.

    Satisfies :class:`~pg_tle_install.core.protocols.ScriptReader`.
    """
    return read_text_exact(path, label="update script")
