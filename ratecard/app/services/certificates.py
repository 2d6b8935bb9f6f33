"""
Simple certificate issue.

Bundles a freshly generated key pair with a minimal certificate-like record
(subject, issuer, public key, validity window, algorithm, serial number).

This is NOT an X.509 certificate: the record is unsigned, there is no chain
and no trust anchor. The only link between subject and key is that they were
generated together.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from ratecard.app.config import get_config
from ratecard.app.models.signing import CertificateBundle, SimpleCertificate
from ratecard.app.services.crypto_backend import CryptoBackend
from ratecard.app.services.key_manager import generate_pem_key_pair

logger = logging.getLogger(__name__)

# 8 random bytes -> 16 hex characters, 64 bits of entropy
SERIAL_NUMBER_BYTES = 8


def _iso_utc(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_serial_number() -> str:
    """Random uppercase hex serial number from the OS CSPRNG."""
    return secrets.token_hex(SERIAL_NUMBER_BYTES).upper()


def generate_certificate(
    subject: str,
    issuer: Optional[str] = None,
    algorithm: Optional[str] = None,
    validity_days: Optional[int] = None,
    backend: Optional[CryptoBackend] = None,
) -> CertificateBundle:
    """
    Generate a key pair and a simple certificate for it.

    Args:
        subject: Certificate subject
        issuer: Certificate issuer (defaults to subject, i.e. self-issued)
        algorithm: Signing algorithm (defaults to the configured algorithm)
        validity_days: Validity period in days (defaults to configuration)
        backend: Crypto backend (defaults to pyca/cryptography)

    Returns:
        CertificateBundle with the certificate and the PEM private key

    Raises:
        ValueError: If validity_days is not a positive integer
        KeyMaterialError: If the algorithm is not supported
    """
    config = get_config()
    algorithm = algorithm or config.DEFAULT_ALGORITHM
    if validity_days is None:
        validity_days = config.CERTIFICATE_VALIDITY_DAYS
    if isinstance(validity_days, bool) or not isinstance(validity_days, int) or validity_days <= 0:
        raise ValueError(f"validity_days must be a positive integer, got {validity_days!r}")

    key_pair = generate_pem_key_pair(algorithm, backend)

    now = datetime.now(timezone.utc)
    certificate = SimpleCertificate(
        subject=subject,
        issuer=issuer or subject,
        public_key=key_pair.public_key,
        valid_from=_iso_utc(now),
        valid_to=_iso_utc(now + timedelta(days=validity_days)),
        algorithm=algorithm,
        serial_number=generate_serial_number(),
    )

    logger.info(
        "Issued %s certificate %s for subject %r",
        algorithm,
        certificate.serial_number,
        subject,
    )
    return CertificateBundle(certificate=certificate, private_key=key_pair.private_key)
