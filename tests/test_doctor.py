"""Tests for the ``doctor`` action (cli/doctor.py).

psycopg and the CA bundle are controlled per test — no database.

Coverage:
* Individual check functions return correct tuples.
* A missing CA bundle only warns.
* A missing psycopg fails.
* Plain output when Rich is absent.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pg_tle_install.cli import exit_codes


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from pg_tle_install.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestPsycopgCheck:
    def test_installed(self) -> None:
        from pg_tle_install.cli.doctor import _psycopg_version_check

        label, _value, status = _psycopg_version_check()
        assert label == "psycopg"
        assert "OK" in status

    @patch.dict("sys.modules", {"psycopg": None})
    def test_not_installed(self) -> None:
        from pg_tle_install.cli.doctor import _psycopg_version_check

        _label, value, status = _psycopg_version_check()
        assert value == "NOT INSTALLED"
        assert "FAIL" in status


class TestLibpqVersion:
    @pytest.mark.parametrize(
        ("number", "expected"),
        [(160002, "16.2"), (150000, "15.0"), (90624, "9.6.24")],
    )
    def test_format(self, number: int, expected: str) -> None:
        from pg_tle_install.cli.doctor import format_libpq_version

        assert format_libpq_version(number) == expected


class TestCaBundleCheck:
    def test_valid(self, ca_file: str) -> None:
        from pg_tle_install.cli.doctor import _ca_bundle_check

        _label, value, status = _ca_bundle_check(ca_file)
        assert value == ca_file
        assert "OK" in status

    def test_missing(self, tmp_path: Path) -> None:
        from pg_tle_install.cli.doctor import _ca_bundle_check

        _label, value, status = _ca_bundle_check(str(tmp_path / "none.pem"))
        assert "missing" in value
        assert "WARN" in status

    def test_unreadable(self, bad_ca_file: str) -> None:
        from pg_tle_install.cli.doctor import _ca_bundle_check

        _label, value, status = _ca_bundle_check(bad_ca_file)
        assert "unreadable" in value
        assert "WARN" in status


class TestOsCheck:
    @patch("pg_tle_install.cli.doctor.platform.machine", return_value="arm64")
    @patch("pg_tle_install.cli.doctor.platform.release", return_value="23.4.0")
    @patch("pg_tle_install.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from pg_tle_install.cli.doctor import _os_check

        _label, value, _status = _os_check()
        assert value == "macOS 23.4.0 (arm64)"


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_all_pass_returns_success(self, ca_file: str) -> None:
        from pg_tle_install.cli.doctor import run_doctor

        assert run_doctor(ca_file) == exit_codes.SUCCESS

    def test_missing_ca_still_succeeds(self, tmp_path: Path) -> None:
        from pg_tle_install.cli.doctor import run_doctor

        assert run_doctor(str(tmp_path / "none.pem")) == exit_codes.SUCCESS

    @patch.dict("sys.modules", {"psycopg": None})
    def test_missing_psycopg_fails(self, ca_file: str) -> None:
        from pg_tle_install.cli.doctor import run_doctor

        assert run_doctor(ca_file) == exit_codes.GENERAL_ERROR

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output(self, ca_file: str, capsys: pytest.CaptureFixture[str]) -> None:
        from pg_tle_install.cli.doctor import run_doctor

        code = run_doctor(ca_file)
        err = capsys.readouterr().err
        assert code == exit_codes.SUCCESS
        assert "pg-tle-install doctor" in err
        assert "CA bundle" in err
        assert "All checks passed." in err


class TestDoctorRouting:
    @patch("pg_tle_install.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_failure_propagates(self, mock_run: MagicMock) -> None:
        from pg_tle_install.cli.app import main

        assert main(["--action", "doctor", "-a", "/x.pem"]) == exit_codes.GENERAL_ERROR
        mock_run.assert_called_once_with("/x.pem")
