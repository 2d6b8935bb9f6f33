"""
Checksum service for rate card documents.

A checksum is the SHA-256 digest (64 lowercase hex characters) of a document's
canonical form, stored at ``metadata.checksum``. It is computed on demand and
goes stale as soon as any canonical-affecting field changes; nothing
revalidates it automatically.

A document without a stored checksum verifies as invalid. That is the
"no protection present" signal, not an error.
"""

import logging
from typing import Any, Dict, Optional

from ratecard.app.models.signing import ChecksumVerification
from ratecard.app.services.c14n import canonicalize_document
from ratecard.app.services.documents import (
    CHECKSUM_FIELD,
    DocumentInput,
    get_metadata_field,
    load_document,
    merge_metadata,
    strip_metadata_fields,
)
from ratecard.app.services.crypto_backend import CryptoBackend, resolve_backend

logger = logging.getLogger(__name__)

CHECKSUM_HASH = "SHA-256"


def calculate_checksum(doc: DocumentInput, backend: Optional[CryptoBackend] = None) -> str:
    """
    Calculate the checksum of a document.

    Args:
        doc: Rate card document (mapping or JSON text)
        backend: Crypto backend computing the digest (defaults to pyca/cryptography)

    Returns:
        Lowercase hex SHA-256 of the canonical form (64 characters)

    Raises:
        ParseError: If JSON text input is malformed
        EncodingError: If the document cannot be canonicalized
    """
    return resolve_backend(backend).digest(CHECKSUM_HASH, canonicalize_document(doc)).hex()


def add_checksum(doc: DocumentInput, backend: Optional[CryptoBackend] = None) -> Dict[str, Any]:
    """
    Return a new document with ``metadata.checksum`` set.

    Other metadata, including an existing signature, is preserved. The
    input document is not modified.
    """
    document = load_document(doc)
    checksum = calculate_checksum(document, backend)
    logger.debug("Adding checksum %s", checksum)
    return merge_metadata(document, **{CHECKSUM_FIELD: checksum})


def verify_checksum(doc: DocumentInput, backend: Optional[CryptoBackend] = None) -> ChecksumVerification:
    """
    Verify the checksum stored in a document.

    Returns:
        ChecksumVerification with:
            - valid: stored checksum equals the recomputed one
            - expected: stored checksum, or None if absent
            - actual: freshly computed checksum
    """
    document = load_document(doc)

    stored = get_metadata_field(document, CHECKSUM_FIELD) or None
    if stored is not None and not isinstance(stored, str):
        stored = str(stored)
    actual = calculate_checksum(document, backend)

    valid = stored == actual
    if stored is not None and not valid:
        logger.warning("Checksum mismatch (stored %.12s..., actual %.12s...)", stored, actual)

    return ChecksumVerification(valid=valid, expected=stored, actual=actual)


def remove_checksum(doc: DocumentInput) -> Dict[str, Any]:
    """Return a new document without ``metadata.checksum``; other metadata is kept."""
    return strip_metadata_fields(load_document(doc), (CHECKSUM_FIELD,))
