"""Core extension service — orchestrates the pg_tle actions.

This service depends on a :class:`~pg_tle_install.core.protocols.PackageReader`
and a :data:`~pg_tle_install.core.protocols.ClientFactory` injected at
construction time, keeping the core free of psycopg and filesystem
imports.

Guarantees
----------
* Every local file is read before a connection is opened.
* Exactly one remote call per action.
* Only :class:`~pg_tle_install.exceptions.PgTleInstallError` subclasses
  escape.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from pg_tle_install.core.models import (
    AvailableExtension,
    AvailableExtensionVersion,
    ExtensionPackage,
    InstallRequest,
    UpdatePathRequest,
)
from pg_tle_install.core.protocols import ClientFactory, PackageReader, ScriptReader
from pg_tle_install.exceptions import PgTleInstallError, RemoteExecutionError

INSTALL_FLAG: bool = False
"""Fourth argument of the install call; passed through unchanged."""

_T = TypeVar("_T")


class ExtensionService:
    """Stateless service that drives a single pg_tle action.

    Parameters
    ----------
    reader:
        Callable loading an :class:`ExtensionPackage` from disk.
    connect:
        Factory returning a context manager around a
        :class:`~pg_tle_install.core.protocols.TleClient`.
    script_reader:
        Callable loading a single update script.  Only needed by
        :meth:`install_update_path`.
    """

    def __init__(
        self,
        reader: PackageReader,
        connect: ClientFactory,
        *,
        script_reader: ScriptReader | None = None,
    ) -> None:
        self._reader: PackageReader = reader
        self._connect: ClientFactory = connect
        self._script_reader: ScriptReader | None = script_reader

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def install(self, request: InstallRequest) -> ExtensionPackage:
        """Read the package and submit it to ``install_extension``.

        Returns the package that was sent.

        Raises
        ------
        ExtensionFileError
            If either file cannot be read.  No connection is attempted.
        ConnectionFailedError
            If the session cannot be opened.
        RemoteExecutionError
            If the server rejects the call.
        """
        package = self._reader(request.files)
        with self._connect() as client:
            self._guard(
                client.install_extension,
                request.ext_name,
                request.ext_rev,
                package.control,
                INSTALL_FLAG,
                package.script,
            )
        return package

    def install_update_path(self, request: UpdatePathRequest) -> bool:
        """Read the update script and submit it to ``install_update_path``.

        Returns the server's result.  The script is read before a
        connection is opened, as for :meth:`install`.
        """
        if self._script_reader is None:
            raise TypeError("ExtensionService was built without a script_reader")
        script = self._script_reader(request.script)
        with self._connect() as client:
            return bool(
                self._guard(
                    client.install_update_path,
                    request.ext_name,
                    request.from_rev,
                    request.to_rev,
                    script,
                )
            )

    def uninstall(self, ext_name: str) -> bool:
        """Remove *ext_name* and every installed version of it."""
        with self._connect() as client:
            return bool(self._guard(client.uninstall_extension, ext_name))

    def list_extensions(self) -> tuple[AvailableExtension, ...]:
        with self._connect() as client:
            return tuple(self._guard(client.available_extensions))

    def list_extension_versions(self) -> tuple[AvailableExtensionVersion, ...]:
        with self._connect() as client:
            return tuple(self._guard(client.available_extension_versions))

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _guard(func: Callable[..., _T], *args: object) -> _T:
        """Invoke *func*, wrapping anything untyped as a remote failure."""
        try:
            return func(*args)
        except PgTleInstallError:
            # Already typed; propagate unchanged.
            raise
        except Exception as exc:
            raise RemoteExecutionError(
                f"Unexpected error during remote call: {exc}",
            ) from exc
