"""
Key generation endpoint.

Keys are generated for the caller and returned once; nothing is stored.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ratecard.app.models.requests import GenerateKeysRequest
from ratecard.app.services.key_manager import generate_pem_key_pair

router = APIRouter(prefix="/v1/keys", tags=["keys"])


@router.post("/generate")
def generate_keys(request: GenerateKeysRequest) -> Dict[str, Any]:
    """
    Generate a PEM key pair.

    Returns publicKey (SPKI) and privateKey (PKCS#8).
    """
    return generate_pem_key_pair(request.algorithm).model_dump(by_alias=True)
