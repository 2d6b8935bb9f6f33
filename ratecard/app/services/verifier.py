"""
Signature verification for rate card documents.

``verify_signature`` never raises for bad input. Every failure, from
malformed JSON to a key that does not fit, comes back as a
``SignatureVerification`` with ``valid=False`` and an ``error`` string, so a
batch of documents cannot be aborted by one bad entry.

Key resolution order:
1. ``public_key`` argument, unless empty
2. ``publicKey`` embedded in the signature record at signing time
3. otherwise: "No public key provided and none embedded in signature"

Verification parameters come from the ``algorithm`` stored in the record.
Pass ``expected_algorithm`` to pin the algorithm a verifier will accept.
"""

import base64
import json
import logging
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from ratecard.app.errors import IntegrityError
from ratecard.app.models.signing import SignatureInfo, SignatureVerification
from ratecard.app.services.c14n import canonicalize_document
from ratecard.app.services.crypto_backend import CryptoBackend, resolve_backend
from ratecard.app.services.documents import (
    SIGNATURE_FIELD,
    DocumentInput,
    get_metadata_field,
    load_document,
    strip_metadata_fields,
)
from ratecard.app.services.key_manager import KeyInput, resolve_public_key

logger = logging.getLogger(__name__)

NO_SIGNATURE = "No signature found in document"
INVALID_FORMAT = "Invalid signature format"
NO_PUBLIC_KEY = "No public key provided and none embedded in signature"


def parse_signature_info(raw: Any) -> SignatureInfo:
    """
    Parse a stored signature record.

    Accepts the JSON text written by ``sign_document`` or an already-decoded
    mapping.

    Raises:
        ValueError: If the record is not JSON or lacks required fields
    """
    if isinstance(raw, str):
        data = json.loads(raw)
    elif isinstance(raw, Mapping):
        data = dict(raw)
    else:
        raise ValueError(f"Signature record must be text or an object, got {type(raw).__name__}")
    return SignatureInfo.model_validate(data)


def verify_signature(
    doc: DocumentInput,
    public_key: Optional[KeyInput] = None,
    *,
    expected_algorithm: Optional[str] = None,
    backend: Optional[CryptoBackend] = None,
) -> SignatureVerification:
    """
    Verify the embedded signature of a rate card document.

    Args:
        doc: Signed rate card document (mapping or JSON text)
        public_key: NativeKey or SPKI PEM text; falls back to the embedded key
        expected_algorithm: If given, the record's algorithm must equal it
        backend: Crypto backend (defaults to pyca/cryptography)

    Returns:
        SignatureVerification with:
            - valid: True only when the signature matches the current
              canonical form exactly
            - signature_info: the parsed record, once parsing succeeded
            - error: reason when verification could not be carried out
    """
    try:
        document = load_document(doc)
    except IntegrityError as e:
        return _failure(f"Verification failed: {e}")

    raw = get_metadata_field(document, SIGNATURE_FIELD)
    if not raw:
        return _failure(NO_SIGNATURE)

    try:
        info = parse_signature_info(raw)
    except (ValueError, ValidationError):
        return _failure(INVALID_FORMAT)

    if expected_algorithm is not None and info.algorithm != expected_algorithm:
        return _failure(
            f"Algorithm mismatch: expected {expected_algorithm}, found {info.algorithm}",
            info,
        )

    key_to_use = public_key or info.public_key
    if not key_to_use:
        return _failure(NO_PUBLIC_KEY, info)

    try:
        crypto = resolve_backend(backend)
        canonical_bytes = canonicalize_document(
            strip_metadata_fields(document, (SIGNATURE_FIELD,))
        )
        signature = base64.b64decode(info.signature, validate=True)
        key = resolve_public_key(key_to_use, info.algorithm, crypto)
        valid = crypto.verify(info.algorithm, key.handle, signature, canonical_bytes)
    except Exception as e:  # backend errors of any kind become a failed result
        return _failure(f"Verification failed: {e}", info)

    if not valid:
        logger.warning("Signature mismatch for %s signature", info.algorithm)
    return SignatureVerification(valid=valid, signature_info=info)


def verify_documents(
    docs: Iterable[DocumentInput],
    public_key: Optional[KeyInput] = None,
    *,
    expected_algorithm: Optional[str] = None,
    backend: Optional[CryptoBackend] = None,
) -> List[SignatureVerification]:
    """Verify many documents; one result per document, in order."""
    return [
        verify_signature(
            doc,
            public_key,
            expected_algorithm=expected_algorithm,
            backend=backend,
        )
        for doc in docs
    ]


def _failure(error: str, info: Optional[SignatureInfo] = None) -> SignatureVerification:
    logger.warning("Signature verification failed: %s", error)
    return SignatureVerification(valid=False, signature_info=info, error=error)
