"""
Cryptographic backend for key generation, signing and verification.

The rest of the package talks to a ``CryptoBackend`` and never to a specific
library's key types, so a different provider (an HSM client, a cloud KMS) can
be dropped in by implementing the same six operations. ``CryptographyBackend``
is the default, built on pyca/cryptography.

Signature Format:
- RSA: PKCS#1 v1.5 signature bytes
- ECDSA: IEEE P1363 ``r || s``, each coordinate left-padded to the curve size
  (32 / 48 / 66 bytes). This is the form Web Crypto emits, so signatures made
  by other implementations of the rate card format verify here. DER is only
  used internally when calling into ``cryptography``.
"""

from typing import Any, Optional, Protocol, Tuple

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ratecard.app.errors import CryptoOperationError, InvalidPemError, KeyMaterialError
from ratecard.app.services.algorithms import (
    RSA_MODULUS_LENGTH,
    RSA_PUBLIC_EXPONENT,
    AlgorithmSpec,
    get_algorithm_spec,
)
from ratecard.app.services.hashing import digest

# Key container formats, named as in Web Crypto
SPKI = "spki"
PKCS8 = "pkcs8"

_CURVES = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}

_HASHES = {
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
}

_PRIVATE_TYPES = (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)
_PUBLIC_TYPES = (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)


class CryptoBackend(Protocol):
    """Capability interface every backend implements."""

    def generate_key_pair(self, algorithm: str) -> Tuple[Any, Any]:
        """Return ``(private_key, public_key)`` native handles."""
        ...

    def import_key(self, fmt: str, data: bytes, algorithm: Optional[str] = None) -> Any:
        """
        Load DER ``data`` (SPKI or PKCS#8) as a native handle.

        With ``algorithm`` the key must fit it; without, any RSA or EC key of
        the right kind (public for SPKI, private for PKCS#8) is accepted.
        """
        ...

    def export_key(self, fmt: str, key: Any) -> bytes:
        """Export a native handle as DER (SPKI or PKCS#8)."""
        ...

    def sign(self, algorithm: str, key: Any, data: bytes) -> bytes:
        ...

    def verify(self, algorithm: str, key: Any, signature: bytes, data: bytes) -> bool:
        ...

    def digest(self, hash_name: str, data: bytes) -> bytes:
        ...


class CryptographyBackend:
    """``CryptoBackend`` implemented with pyca/cryptography. Stateless."""

    name = "cryptography"

    def generate_key_pair(self, algorithm: str) -> Tuple[Any, Any]:
        spec = get_algorithm_spec(algorithm)

        if spec.is_rsa:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=RSA_MODULUS_LENGTH,
            )
        else:
            private_key = ec.generate_private_key(_CURVES[spec.curve]())

        return private_key, private_key.public_key()

    def import_key(self, fmt: str, data: bytes, algorithm: Optional[str] = None) -> Any:
        spec = get_algorithm_spec(algorithm) if algorithm is not None else None

        try:
            if fmt == PKCS8:
                key = serialization.load_der_private_key(data, password=None)
            elif fmt == SPKI:
                key = serialization.load_der_public_key(data)
            else:
                raise KeyMaterialError(f"Unsupported key format: {fmt}")
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise InvalidPemError(f"Malformed {fmt} key: {e}") from e

        if spec is None:
            expected = _PRIVATE_TYPES if fmt == PKCS8 else _PUBLIC_TYPES
            if not isinstance(key, expected):
                kind = "private" if fmt == PKCS8 else "public"
                raise KeyMaterialError(f"Expected an RSA or EC {kind} key, got {type(key).__name__}")
        else:
            _check_key(key, spec, private=(fmt == PKCS8))
        return key

    def export_key(self, fmt: str, key: Any) -> bytes:
        if fmt == PKCS8:
            if not isinstance(key, _PRIVATE_TYPES):
                raise KeyMaterialError("PKCS#8 export requires a private key")
            return key.private_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        if fmt == SPKI:
            if isinstance(key, _PRIVATE_TYPES):
                key = key.public_key()
            if not isinstance(key, _PUBLIC_TYPES):
                raise KeyMaterialError("SPKI export requires an RSA or EC key")
            return key.public_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        raise KeyMaterialError(f"Unsupported key format: {fmt}")

    def sign(self, algorithm: str, key: Any, data: bytes) -> bytes:
        spec = get_algorithm_spec(algorithm)
        _check_key(key, spec, private=True)
        hash_algorithm = _HASHES[spec.hash]()

        try:
            if spec.is_rsa:
                return key.sign(data, padding.PKCS1v15(), hash_algorithm)

            der = key.sign(data, ec.ECDSA(hash_algorithm))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CryptoOperationError(f"{algorithm} signing failed: {e}") from e

        r, s = decode_dss_signature(der)
        size = _coordinate_size(key)
        return r.to_bytes(size, byteorder="big") + s.to_bytes(size, byteorder="big")

    def verify(self, algorithm: str, key: Any, signature: bytes, data: bytes) -> bool:
        spec = get_algorithm_spec(algorithm)
        _check_key(key, spec, private=False)
        hash_algorithm = _HASHES[spec.hash]()

        try:
            if spec.is_rsa:
                key.verify(signature, data, padding.PKCS1v15(), hash_algorithm)
                return True

            size = _coordinate_size(key)
            if len(signature) != 2 * size:
                return False
            r = int.from_bytes(signature[:size], byteorder="big")
            s = int.from_bytes(signature[size:], byteorder="big")
            key.verify(encode_dss_signature(r, s), data, ec.ECDSA(hash_algorithm))
            return True
        except InvalidSignature:
            return False
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CryptoOperationError(f"{algorithm} verification failed: {e}") from e

    def digest(self, hash_name: str, data: bytes) -> bytes:
        return digest(hash_name, data)


def _coordinate_size(key: Any) -> int:
    return (key.curve.key_size + 7) // 8


def _check_key(key: Any, spec: AlgorithmSpec, private: bool) -> None:
    """
    Ensure a native key fits the algorithm family, curve and direction.

    Raises:
        KeyMaterialError: On any mismatch
    """
    if spec.is_rsa:
        expected = rsa.RSAPrivateKey if private else rsa.RSAPublicKey
    else:
        expected = ec.EllipticCurvePrivateKey if private else ec.EllipticCurvePublicKey

    if not isinstance(key, expected):
        kind = "private" if private else "public"
        raise KeyMaterialError(
            f"{spec.name} requires an {spec.family} {kind} key, got {type(key).__name__}"
        )

    if not spec.is_rsa and key.curve.name != _CURVES[spec.curve].name:
        raise KeyMaterialError(
            f"{spec.name} requires curve {spec.curve}, key uses {key.curve.name}"
        )


_DEFAULT_BACKEND = CryptographyBackend()


def resolve_backend(backend: Optional[CryptoBackend] = None) -> CryptoBackend:
    """Return ``backend`` or the default stateless ``CryptographyBackend``."""
    return backend if backend is not None else _DEFAULT_BACKEND
