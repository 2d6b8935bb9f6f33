"""
Hashing utilities for rate card integrity.

Provides the content digests used for document checksums and the hash
functions named by the signing algorithms.
"""

import hashlib
from typing import Any

from ratecard.app.errors import KeyMaterialError
from ratecard.app.services.c14n import json_c14n_v1

# Hash names as they appear in the algorithm table, mapped to hashlib names
HASH_FUNCTIONS = {
    "SHA-256": "sha256",
    "SHA-384": "sha384",
    "SHA-512": "sha512",
}


def sha256_hex(data: bytes) -> str:
    """
    Compute SHA-256 hash and return as lowercase hexadecimal string.

    Args:
        data: Raw bytes to hash

    Returns:
        Lowercase hexadecimal SHA-256 hash (64 characters)

    Example:
        >>> sha256_hex(b"hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).hexdigest()


def sha256_prefixed(data: bytes) -> str:
    """
    Compute SHA-256 hash with 'sha256:' prefix.

    Example:
        >>> sha256_prefixed(b"hello")
        'sha256:2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return f"sha256:{sha256_hex(data)}"


def digest(hash_name: str, data: bytes) -> bytes:
    """
    Raw digest of ``data`` with one of the supported hash functions.

    Args:
        hash_name: "SHA-256", "SHA-384" or "SHA-512"
        data: Raw bytes to hash

    Raises:
        KeyMaterialError: If the hash name is not supported
    """
    try:
        name = HASH_FUNCTIONS[hash_name]
    except KeyError:
        raise KeyMaterialError(f"Unsupported hash: {hash_name}") from None
    return hashlib.new(name, data).digest()


def hash_c14n(obj: Any) -> str:
    """
    Hash a JSON-compatible value using its canonical representation.

    Unlike ``calculate_checksum`` the value is hashed exactly as given; no
    integrity fields are stripped.

    Returns:
        ``sha256:``-prefixed hash of the canonical bytes

    Raises:
        EncodingError: If the value has no canonical form
    """
    return sha256_prefixed(json_c14n_v1(obj))
