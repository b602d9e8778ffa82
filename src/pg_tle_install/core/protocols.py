"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol

from pg_tle_install.core.models import (
    AvailableExtension,
    AvailableExtensionVersion,
    ExtensionFiles,
    ExtensionPackage,
)


class PackageReader(Protocol):
    """Contract for loading extension files from storage."""

    def __call__(self, files: ExtensionFiles) -> ExtensionPackage:
        """Read the control file, then the SQL script.

        Raises
        ------
        ExtensionFileError
            When either file cannot be read.
        """
        ...  # pragma: no cover


class ScriptReader(Protocol):
    """Contract for loading a single update script."""

    def __call__(self, path: Path) -> str:
        ...  # pragma: no cover


class TleClient(Protocol):
    """Contract for a live session exposing the pg_tle management API.

    Implementations must map all driver exceptions to
    :class:`~pg_tle_install.exceptions.DatabaseError` subclasses.
    """

    def install_extension(
        self,
        name: str,
        version: str,
        control: str,
        flag: bool,
        script: str,
    ) -> None:
        """Call the server-side install procedure with five positional arguments."""
        ...  # pragma: no cover

    def install_update_path(
        self,
        name: str,
        from_version: str,
        to_version: str,
        script: str,
    ) -> bool:
        ...  # pragma: no cover

    def uninstall_extension(self, name: str) -> bool:
        ...  # pragma: no cover

    def available_extensions(self) -> tuple[AvailableExtension, ...]:
        ...  # pragma: no cover

    def available_extension_versions(self) -> tuple[AvailableExtensionVersion, ...]:
        ...  # pragma: no cover


ClientFactory = Callable[[], AbstractContextManager[TleClient]]
"""Zero-argument callable that opens a session when entered."""
