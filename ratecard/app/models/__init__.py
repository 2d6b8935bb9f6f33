"""
Pydantic models for the rate card integrity layer.
"""

from ratecard.app.models.signing import (
    CertificateBundle,
    ChecksumVerification,
    PemKeyPair,
    SignatureInfo,
    SignatureVerification,
    SigningAlgorithm,
    SimpleCertificate,
)

__all__ = [
    "CertificateBundle",
    "ChecksumVerification",
    "PemKeyPair",
    "SignatureInfo",
    "SignatureVerification",
    "SigningAlgorithm",
    "SimpleCertificate",
]
