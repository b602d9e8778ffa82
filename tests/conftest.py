"""Shared pytest fixtures and configuration for the pg-tle-install test suite.

Guidelines
----------
* No database access outside ``test_integration.py``.
* psycopg is mocked at the infra boundary.
* Extension files live under ``tmp_path``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"

CONTROL_TEXT = "# myext extension\n"
SCRIPT_TEXT = "CREATE FUNCTION myext_hello() RETURNS text AS $$ SELECT 'hello' $$ LANGUAGE sql;"


@pytest.fixture()
def ca_file() -> str:
    """Self-signed CA certificate in PEM form."""
    return str(DATA_DIR / "ca.pem")


@pytest.fixture()
def server_cert_file() -> str:
    """Self-signed server certificate marked ``CA:FALSE``."""
    return str(DATA_DIR / "server_only.pem")


@pytest.fixture()
def bad_ca_file() -> str:
    return str(DATA_DIR / "not_a_cert.pem")


@pytest.fixture()
def ext_dir(tmp_path: Path) -> Path:
    """Directory holding ``myext.control`` and ``myext--1.0.sql``."""
    (tmp_path / "myext.control").write_bytes(CONTROL_TEXT.encode("utf-8"))
    (tmp_path / "myext--1.0.sql").write_bytes(SCRIPT_TEXT.encode("utf-8"))
    return tmp_path
