"""Domain models for pg-tle-install.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and trivial derivation.  They carry zero
I/O and no dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_CA_FILE: str = "/etc/pki/ca-trust/extracted/pem/tls-ca-bundle.pem"
"""System CA bundle used when ``--ca-file`` is not supplied."""


# ---------------------------------------------------------------------------
# Invocation parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InstallRequest:
    """Everything needed to install one extension revision."""

    pg_conn: str
    """libpq connection string (key/value or URI form)."""

    ext_path: str
    """Directory holding the control and SQL files."""

    ext_name: str
    """Extension name, used for file names and as the remote argument."""

    ext_rev: str
    """Extension revision (version) to install."""

    ca_file: str = DEFAULT_CA_FILE
    """PEM bundle the server certificate must chain to."""

    @property
    def files(self) -> ExtensionFiles:
        return ExtensionFiles.for_revision(self.ext_path, self.ext_name, self.ext_rev)


@dataclass(frozen=True, slots=True)
class UpdatePathRequest:
    """Everything needed to install one update script between two revisions."""

    pg_conn: str
    ext_path: str
    ext_name: str

    from_rev: str
    """Revision the script upgrades from."""

    to_rev: str
    """Revision the script upgrades to."""

    ca_file: str = DEFAULT_CA_FILE

    @property
    def script(self) -> Path:
        """``{path}/{name}--{from}--{to}.sql``."""
        return Path(self.ext_path) / f"{self.ext_name}--{self.from_rev}--{self.to_rev}.sql"


# ---------------------------------------------------------------------------
# Extension files
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExtensionFiles:
    """Resolved locations of the two files making up a TLE package."""

    control: Path
    script: Path

    @classmethod
    def for_revision(cls, ext_path: str, ext_name: str, ext_rev: str) -> ExtensionFiles:
        """Build ``{path}/{name}.control`` and ``{path}/{name}--{rev}.sql``."""
        base = Path(ext_path)
        return cls(
            control=base / f"{ext_name}.control",
            script=base / f"{ext_name}--{ext_rev}.sql",
        )


@dataclass(frozen=True, slots=True)
class ExtensionPackage:
    """File contents sent verbatim to the server."""

    control: str
    """Full text of the control file."""

    script: str
    """Full text of the SQL definition script."""


# ---------------------------------------------------------------------------
# Listing rows
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AvailableExtension:
    """One row of ``pgtle.available_extensions()``."""

    name: str
    default_version: str | None
    comment: str | None


@dataclass(frozen=True, slots=True)
class AvailableExtensionVersion:
    """One row of ``pgtle.available_extension_versions()``."""

    name: str
    version: str
    superuser: bool | None
    trusted: bool | None
    relocatable: bool | None
    schema: str | None
    requires: tuple[str, ...]
    comment: str | None
