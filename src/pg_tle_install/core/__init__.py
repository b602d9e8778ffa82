"""Core / service layer — domain models and action orchestration.

Rules
-----
* No ``print()`` calls.
* No direct filesystem or network I/O; readers and clients are injected.
* No imports from ``cli`` or ``infra``.
"""

from pg_tle_install.core.extension_service import INSTALL_FLAG, ExtensionService
from pg_tle_install.core.models import (
    DEFAULT_CA_FILE,
    AvailableExtension,
    AvailableExtensionVersion,
    ExtensionFiles,
    ExtensionPackage,
    InstallRequest,
    UpdatePathRequest,
)
from pg_tle_install.core.protocols import (
    ClientFactory,
    PackageReader,
    ScriptReader,
    TleClient,
)

__all__: list[str] = [
    "DEFAULT_CA_FILE",
    "INSTALL_FLAG",
    "AvailableExtension",
    "AvailableExtensionVersion",
    "ClientFactory",
    "ExtensionFiles",
    "ExtensionPackage",
    "ExtensionService",
    "InstallRequest",
    "PackageReader",
    "ScriptReader",
    "TleClient",
    "UpdatePathRequest",
]
