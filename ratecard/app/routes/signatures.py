"""
Signing and verification endpoints.

Verification always answers 200 with a structured result; only malformed
signing input is reported as an error status.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ratecard.app.config import get_config
from ratecard.app.models.requests import DocumentRequest, SignRequest, VerifyRequest
from ratecard.app.services.signer import remove_signature, sign_document
from ratecard.app.services.verifier import verify_signature

router = APIRouter(prefix="/v1/signatures", tags=["signatures"])


@router.post("/sign")
def sign(request: SignRequest) -> Dict[str, Any]:
    """Return the document with metadata.signature set."""
    signed = sign_document(
        request.document,
        request.private_key,
        request.algorithm,
        public_key=request.public_key,
        key_id=request.key_id,
        include_timestamp=request.include_timestamp,
    )
    return {"document": signed}


@router.post("/verify")
def verify(request: VerifyRequest) -> Dict[str, Any]:
    """
    Verify metadata.signature.

    expected_algorithm falls back to RATECARD_EXPECTED_ALGORITHM when set.
    """
    expected = request.expected_algorithm or get_config().EXPECTED_ALGORITHM
    result = verify_signature(
        request.document,
        request.public_key,
        expected_algorithm=expected,
    )
    return result.model_dump(by_alias=True, exclude_none=True)


@router.post("/remove")
def remove(request: DocumentRequest) -> Dict[str, Any]:
    """Return the document without metadata.signature."""
    return {"document": remove_signature(request.document)}
