"""
Certificate issue endpoint.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ratecard.app.models.requests import CertificateRequest
from ratecard.app.services.certificates import generate_certificate

router = APIRouter(prefix="/v1/certificates", tags=["certificates"])


@router.post("")
def issue_certificate(request: CertificateRequest) -> Dict[str, Any]:
    """
    Issue a simple, unsigned certificate with a fresh key pair.

    The private key is returned once and not retained.
    """
    bundle = generate_certificate(
        subject=request.subject,
        issuer=request.issuer,
        algorithm=request.algorithm,
        validity_days=request.validity_days,
    )
    return bundle.model_dump(by_alias=True)
