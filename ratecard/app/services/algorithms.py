"""
Signing algorithm table.

Identifiers are exact and case-sensitive:

    RS256 / RS384 / RS512   RSASSA-PKCS1-v1_5, 2048-bit modulus, e=65537, SHA-256/384/512
    ES256 / ES384 / ES512   ECDSA on P-256 / P-384 / P-521 with SHA-256/384/512
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ratecard.app.errors import KeyMaterialError

RSA_FAMILY = "RSASSA-PKCS1-v1_5"
EC_FAMILY = "ECDSA"

RSA_MODULUS_LENGTH = 2048
RSA_PUBLIC_EXPONENT = 65537


@dataclass(frozen=True)
class AlgorithmSpec:
    """Parameters selected by one algorithm identifier."""

    name: str
    family: str
    hash: str
    curve: Optional[str] = None

    @property
    def is_rsa(self) -> bool:
        return self.family == RSA_FAMILY


ALGORITHM_CONFIG: Dict[str, AlgorithmSpec] = {
    "RS256": AlgorithmSpec("RS256", RSA_FAMILY, "SHA-256"),
    "RS384": AlgorithmSpec("RS384", RSA_FAMILY, "SHA-384"),
    "RS512": AlgorithmSpec("RS512", RSA_FAMILY, "SHA-512"),
    "ES256": AlgorithmSpec("ES256", EC_FAMILY, "SHA-256", "P-256"),
    "ES384": AlgorithmSpec("ES384", EC_FAMILY, "SHA-384", "P-384"),
    "ES512": AlgorithmSpec("ES512", EC_FAMILY, "SHA-512", "P-521"),
}


def get_algorithm_spec(algorithm: str) -> AlgorithmSpec:
    """
    Look up an algorithm identifier.

    Raises:
        KeyMaterialError: If the identifier is not supported
    """
    spec = ALGORITHM_CONFIG.get(algorithm) if isinstance(algorithm, str) else None
    if spec is None:
        raise KeyMaterialError(
            f"Unsupported algorithm: {algorithm!r}. "
            f"Supported: {', '.join(ALGORITHM_CONFIG)}"
        )
    return spec
