"""Infrastructure: TLS settings for the database connection.

The connection trusts only certificates that chain to the supplied CA
bundle, but **does not verify the server's hostname** against the
certificate.  Any server holding a certificate issued under that CA is
accepted, which leaves room for a man-in-the-middle inside the CA's
trust scope.  This is intentional and is expressed through the explicit
``verify_hostname=False`` field below rather than hidden in a libpq
setting.

libpq does not accept an ``ssl.SSLContext``; the bundle is loaded here
with :mod:`ssl` only to fail fast on an unusable file, and the
connection itself is configured through libpq parameters.
"""

from __future__ import annotations

import ssl
from dataclasses import dataclass

from pg_tle_install.exceptions import TlsConfigError


@dataclass(frozen=True, slots=True)
class TlsSettings:
    """TLS policy applied to every connection the tool opens."""

    ca_file: str
    """PEM bundle the server certificate must chain to."""

    verify_hostname: bool = False
    """Server identity check.  Off unless explicitly enabled."""

    @property
    def sslmode(self) -> str:
        # verify-ca checks the chain only; verify-full adds the host name.
        return "verify-full" if self.verify_hostname else "verify-ca"

    def libpq_params(self) -> dict[str, str]:
        """Return keyword arguments overriding ``sslmode``/``sslrootcert``."""
        return {"sslmode": self.sslmode, "sslrootcert": self.ca_file}


def load_ca_bundle(ca_file: str) -> ssl.SSLContext:
    """Load *ca_file* into a client context or raise :class:`TlsConfigError`."""
    try:
        context = ssl.create_default_context(cafile=ca_file)
    except (OSError, ssl.SSLError) as exc:
        raise TlsConfigError(
            f"Cannot load CA bundle {ca_file}: {exc}",
            hint="Pass a PEM certificate bundle with --ca-file.",
        ) from exc
    # get_ca_certs() skips certificates without the CA flag; libpq still
    # accepts a lone self-signed server certificate as sslrootcert.
    if not context.cert_store_stats()["x509"]:
        raise TlsConfigError(
            f"CA bundle {ca_file} contains no certificates.",
            hint="Pass a PEM certificate bundle with --ca-file.",
        )
    return context


def build_tls_settings(ca_file: str) -> TlsSettings:
    """Validate *ca_file* and return settings with hostname checks disabled."""
    load_ca_bundle(ca_file)
    return TlsSettings(ca_file=ca_file, verify_hostname=False)
