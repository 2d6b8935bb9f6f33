"""
Integrity records and verification results.

Field names are snake_case in Python and camelCase on the wire, matching the
rate card document format (``publicKey``, ``keyId``, ``validFrom``, ...).
Serialize with ``model_dump(by_alias=True, exclude_none=True)``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SigningAlgorithm = Literal["RS256", "RS384", "RS512", "ES256", "ES384", "ES512"]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SignatureInfo(_WireModel):
    """Signature record embedded (as JSON text) at ``metadata.signature``."""

    algorithm: SigningAlgorithm = Field(..., description="Algorithm identifier, e.g. RS256")
    signature: str = Field(..., description="Base64 raw signature over the canonical form")
    public_key: Optional[str] = Field(default=None, alias="publicKey", description="SPKI PEM of the signer")
    key_id: Optional[str] = Field(default=None, alias="keyId", description="Caller-assigned key identifier")
    timestamp: Optional[str] = Field(default=None, description="UTC signing time, ISO 8601")

    def to_json(self) -> str:
        """Compact JSON text in the field order algorithm, signature, publicKey, keyId, timestamp."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class ChecksumVerification(BaseModel):
    """Result of verifying ``metadata.checksum``."""

    valid: bool
    expected: Optional[str] = Field(default=None, description="Stored checksum, None when absent")
    actual: str = Field(..., description="Freshly computed checksum")


class SignatureVerification(_WireModel):
    """Result of verifying ``metadata.signature``. Never raised, always returned."""

    valid: bool
    signature_info: Optional[SignatureInfo] = Field(default=None, alias="signatureInfo")
    error: Optional[str] = None


class PemKeyPair(_WireModel):
    """PEM-encoded key pair (SPKI public key, PKCS#8 private key)."""

    public_key: str = Field(..., alias="publicKey")
    private_key: str = Field(..., alias="privateKey")


class SimpleCertificate(_WireModel):
    """
    Minimal certificate-like record.

    Unsigned and chain-less: the only binding between subject and key is
    that they were generated together. Not an X.509 certificate.
    """

    subject: str
    issuer: str
    public_key: str = Field(..., alias="publicKey")
    valid_from: str = Field(..., alias="validFrom")
    valid_to: str = Field(..., alias="validTo")
    algorithm: SigningAlgorithm
    serial_number: str = Field(..., alias="serialNumber")


class CertificateBundle(_WireModel):
    """A freshly issued certificate and the PEM private key that belongs to it."""

    certificate: SimpleCertificate
    private_key: str = Field(..., alias="privateKey")
