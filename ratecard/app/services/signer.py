"""
Embedded signatures for rate card documents.

The signature is stored inside the document it signs, as JSON text at
``metadata.signature``:

    {"algorithm":"ES256","signature":"<base64>","publicKey":"-----BEGIN...",
     "keyId":"pricing-2026","timestamp":"2026-01-12T10:30:00.000Z"}

Only ``algorithm`` and ``signature`` are always present.

Signed bytes are the document's canonical form (see c14n), which never
includes ``metadata.signature``. Any prior signature is cleared before
signing; an existing ``metadata.checksum`` is left in place.
"""

import base64
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ratecard.app.config import get_config
from ratecard.app.models.signing import SignatureInfo
from ratecard.app.services.c14n import canonicalize_document
from ratecard.app.services.crypto_backend import CryptoBackend, resolve_backend
from ratecard.app.services.documents import (
    SIGNATURE_FIELD,
    DocumentInput,
    load_document,
    merge_metadata,
    strip_metadata_fields,
)
from ratecard.app.services.key_manager import (
    KeyInput,
    export_public_key_pem,
    resolve_private_key,
)

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sign_document(
    doc: DocumentInput,
    private_key: KeyInput,
    algorithm: Optional[str] = None,
    *,
    public_key: Optional[KeyInput] = None,
    key_id: Optional[str] = None,
    include_timestamp: Optional[bool] = None,
    backend: Optional[CryptoBackend] = None,
) -> Dict[str, Any]:
    """
    Sign a rate card document.

    Args:
        doc: Rate card document (mapping or JSON text)
        private_key: NativeKey or PKCS#8 PEM text
        algorithm: Signing algorithm (defaults to the configured algorithm)
        public_key: Public key to embed in the record, so verifiers need not
            be handed one separately
        key_id: Identifier to embed in the record
        include_timestamp: Embed the signing time (defaults to configuration)
        backend: Crypto backend (defaults to pyca/cryptography)

    Returns:
        New document with ``metadata.signature`` set; the input is not modified

    Raises:
        ParseError: If JSON text input is malformed
        EncodingError: If the document cannot be canonicalized
        KeyMaterialError: If the key is malformed or does not fit the algorithm
        CryptoOperationError: If the signing primitive fails
    """
    config = get_config()
    algorithm = algorithm or config.DEFAULT_ALGORITHM
    if include_timestamp is None:
        include_timestamp = config.INCLUDE_TIMESTAMP
    crypto = resolve_backend(backend)

    # Clear any existing signature; the checksum stays
    document = strip_metadata_fields(load_document(doc), (SIGNATURE_FIELD,))

    canonical_bytes = canonicalize_document(document)

    key = resolve_private_key(private_key, algorithm, crypto)
    signature = crypto.sign(algorithm, key.handle, canonical_bytes)

    info = SignatureInfo(
        algorithm=algorithm,
        signature=base64.b64encode(signature).decode("utf-8"),
        public_key=export_public_key_pem(public_key, crypto) if public_key is not None else None,
        key_id=key_id or None,
        timestamp=utc_timestamp() if include_timestamp else None,
    )

    logger.info("Signed document with %s (key_id=%s)", algorithm, key_id or "-")
    return merge_metadata(document, **{SIGNATURE_FIELD: info.to_json()})


def remove_signature(doc: DocumentInput) -> Dict[str, Any]:
    """Return a new document without ``metadata.signature``; other metadata is kept."""
    return strip_metadata_fields(load_document(doc), (SIGNATURE_FIELD,))
