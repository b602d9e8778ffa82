"""Tests for the core extension service (core/extension_service.py).

The reader and client are mocked — no files, no database.

Coverage:
* Install call arguments and their order.
* The fourth argument is always ``False``.
* Files are read before a connection is opened.
* Failures at each step stop the pipeline.
* Update-path install: script read before connecting.
* Uninstall and listing delegation.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pg_tle_install.core.extension_service import INSTALL_FLAG, ExtensionService
from pg_tle_install.core.models import (
    AvailableExtension,
    ExtensionFiles,
    ExtensionPackage,
    InstallRequest,
    UpdatePathRequest,
)
from pg_tle_install.exceptions import (
    ConnectionFailedError,
    ExtensionFileError,
    RemoteExecutionError,
)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _request(**overrides: str) -> InstallRequest:
    defaults = {
        "pg_conn": "host=db dbname=postgres",
        "ext_path": "/ext",
        "ext_name": "myext",
        "ext_rev": "1.0",
    }
    defaults.update(overrides)
    return InstallRequest(**defaults)


class _Recorder:
    """Client factory recording the order of reads, connects and calls."""

    def __init__(self, client: MagicMock | None = None) -> None:
        self.events: list[str] = []
        self.client = client or MagicMock()

    def reader(self, files: ExtensionFiles) -> ExtensionPackage:
        self.events.append("read")
        return ExtensionPackage(control="# ctl\n", script="CREATE FUNCTION f() ...")

    def script_reader(self, path: Path) -> str:
        self.events.append(f"read {path.name}")
        return "ALTER FUNCTION f() ..."

    @contextmanager
    def connect(self) -> Iterator[MagicMock]:
        self.events.append("connect")
        yield self.client
        self.events.append("close")


# ---------------------------------------------------------------------------
# Install
# ---------------------------------------------------------------------------

class TestInstall:
    def test_arguments_in_order(self) -> None:
        rec = _Recorder()
        ExtensionService(rec.reader, rec.connect).install(_request())

        rec.client.install_extension.assert_called_once_with(
            "myext", "1.0", "# ctl\n", False, "CREATE FUNCTION f() ..."
        )

    @pytest.mark.parametrize("name", ["trusted_ext", "superuser", "true"])
    def test_flag_is_always_false(self, name: str) -> None:
        rec = _Recorder()
        ExtensionService(rec.reader, rec.connect).install(_request(ext_name=name))

        flag = rec.client.install_extension.call_args.args[3]
        assert flag is False
        assert INSTALL_FLAG is False

    def test_reads_before_connecting(self) -> None:
        rec = _Recorder()
        ExtensionService(rec.reader, rec.connect).install(_request())
        assert rec.events == ["read", "connect", "close"]

    def test_reader_receives_resolved_files(self) -> None:
        reader = MagicMock(return_value=ExtensionPackage(control="c", script="s"))
        rec = _Recorder()
        ExtensionService(reader, rec.connect).install(_request(ext_path="/srv", ext_rev="2.1"))

        reader.assert_called_once_with(ExtensionFiles.for_revision("/srv", "myext", "2.1"))

    def test_returns_package_sent(self) -> None:
        rec = _Recorder()
        package = ExtensionService(rec.reader, rec.connect).install(_request())
        assert package == ExtensionPackage(control="# ctl\n", script="CREATE FUNCTION f() ...")

    def test_file_error_prevents_connection(self) -> None:
        reader = MagicMock(side_effect=ExtensionFileError("missing"))
        connect = MagicMock()

        with pytest.raises(ExtensionFileError):
            ExtensionService(reader, connect).install(_request())
        connect.assert_not_called()

    def test_connection_error_prevents_call(self) -> None:
        client = MagicMock()

        @contextmanager
        def _connect() -> Iterator[MagicMock]:
            raise ConnectionFailedError("unreachable")
            yield client  # pragma: no cover

        rec = _Recorder()
        with pytest.raises(ConnectionFailedError):
            ExtensionService(rec.reader, _connect).install(_request())
        client.install_extension.assert_not_called()

    def test_remote_error_propagates_unchanged(self) -> None:
        client = MagicMock()
        original = RemoteExecutionError('extension "myext" already installed')
        client.install_extension.side_effect = original
        rec = _Recorder(client)

        with pytest.raises(RemoteExecutionError) as exc_info:
            ExtensionService(rec.reader, rec.connect).install(_request())
        assert exc_info.value is original

    def test_untyped_error_is_wrapped(self) -> None:
        client = MagicMock()
        client.install_extension.side_effect = RuntimeError("socket closed")
        rec = _Recorder(client)

        with pytest.raises(RemoteExecutionError, match="socket closed"):
            ExtensionService(rec.reader, rec.connect).install(_request())


# ---------------------------------------------------------------------------
# Other actions
# ---------------------------------------------------------------------------

class TestOtherActions:
    def test_uninstall(self) -> None:
        rec = _Recorder()
        rec.client.uninstall_extension.return_value = True

        assert ExtensionService(rec.reader, rec.connect).uninstall("myext") is True
        rec.client.uninstall_extension.assert_called_once_with("myext")
        assert "read" not in rec.events

    def test_list_extensions(self) -> None:
        rows = [AvailableExtension(name="myext", default_version="1.0", comment=None)]
        rec = _Recorder()
        rec.client.available_extensions.return_value = rows

        result = ExtensionService(rec.reader, rec.connect).list_extensions()
        assert result == tuple(rows)

    def test_list_versions_empty(self) -> None:
        rec = _Recorder()
        rec.client.available_extension_versions.return_value = ()

        assert ExtensionService(rec.reader, rec.connect).list_extension_versions() == ()


# ---------------------------------------------------------------------------
# Update path
# ---------------------------------------------------------------------------

def _update_request(**overrides: str) -> UpdatePathRequest:
    defaults = {
        "pg_conn": "host=db dbname=postgres",
        "ext_path": "/ext",
        "ext_name": "myext",
        "from_rev": "1.0",
        "to_rev": "1.1",
    }
    defaults.update(overrides)
    return UpdatePathRequest(**defaults)


class TestInstallUpdatePath:
    def test_arguments_in_order(self) -> None:
        rec = _Recorder()
        rec.client.install_update_path.return_value = True
        service = ExtensionService(rec.reader, rec.connect, script_reader=rec.script_reader)

        assert service.install_update_path(_update_request()) is True
        rec.client.install_update_path.assert_called_once_with(
            "myext", "1.0", "1.1", "ALTER FUNCTION f() ..."
        )

    def test_reads_script_before_connecting(self) -> None:
        rec = _Recorder()
        service = ExtensionService(rec.reader, rec.connect, script_reader=rec.script_reader)

        service.install_update_path(_update_request())
        assert rec.events == ["read myext--1.0--1.1.sql", "connect", "close"]

    def test_file_error_prevents_connection(self) -> None:
        script_reader = MagicMock(side_effect=ExtensionFileError("missing"))
        connect = MagicMock()
        service = ExtensionService(MagicMock(), connect, script_reader=script_reader)

        with pytest.raises(ExtensionFileError):
            service.install_update_path(_update_request())
        connect.assert_not_called()

    def test_false_result(self) -> None:
        rec = _Recorder()
        rec.client.install_update_path.return_value = False
        service = ExtensionService(rec.reader, rec.connect, script_reader=rec.script_reader)

        assert service.install_update_path(_update_request()) is False

    def test_requires_script_reader(self) -> None:
        rec = _Recorder()
        with pytest.raises(TypeError):
            ExtensionService(rec.reader, rec.connect).install_update_path(_update_request())
        assert rec.events == []
