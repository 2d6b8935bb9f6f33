"""
Request models for the integrity endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ratecard.app.models.signing import SigningAlgorithm


class DocumentRequest(BaseModel):
    """Request body carrying a single rate card document."""
    document: Dict[str, Any] = Field(..., description="Rate card document (JSON object)")


class GenerateKeysRequest(BaseModel):
    """Request body for /v1/keys/generate."""
    algorithm: Optional[SigningAlgorithm] = Field(default=None, description="Signing algorithm (default from configuration)")


class SignRequest(BaseModel):
    """Request body for /v1/signatures/sign.

    The private key is used for this one request and never stored.
    """
    document: Dict[str, Any] = Field(..., description="Rate card document to sign")
    private_key: str = Field(..., description="PKCS#8 PEM private key")
    algorithm: Optional[SigningAlgorithm] = Field(default=None, description="Signing algorithm (default from configuration)")
    public_key: Optional[str] = Field(default=None, description="SPKI PEM public key to embed in the signature")
    key_id: Optional[str] = Field(default=None, description="Key identifier to embed in the signature")
    include_timestamp: Optional[bool] = Field(default=None, description="Embed the signing time")


class VerifyRequest(BaseModel):
    """Request body for /v1/signatures/verify."""
    document: Dict[str, Any] = Field(..., description="Signed rate card document")
    public_key: Optional[str] = Field(default=None, description="SPKI PEM public key; embedded key used if omitted")
    expected_algorithm: Optional[SigningAlgorithm] = Field(default=None, description="Reject records signed with any other algorithm")


class CertificateRequest(BaseModel):
    """Request body for /v1/certificates."""
    subject: str = Field(..., min_length=1, description="Certificate subject")
    issuer: Optional[str] = Field(default=None, description="Issuer (defaults to subject)")
    algorithm: Optional[SigningAlgorithm] = Field(default=None, description="Signing algorithm (default from configuration)")
    validity_days: Optional[int] = Field(default=None, gt=0, description="Validity period in days")
