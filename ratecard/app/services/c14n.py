"""
Deterministic JSON canonicalization (c14n) module.

This module produces the canonical byte representation of a rate card
document. The canonical form is the input to both the checksum and the
signature, so any drift here breaks every stored checksum and signature.

Canonicalization Rules (v1, RFC 8785 / JCS):
1. UTF-8 encoding
2. No whitespace outside strings
3. Object keys sorted (UTF-16 code unit order, as RFC 8785 requires)
4. Array order preserved as-is
5. Strings emitted with JSON escaping
6. Numbers in ECMAScript shortest round-trip form (1.0 -> 1, 1e21 -> 1e+21)
7. Booleans as lowercase "true"/"false"
8. Null as "null"

Integrity Field Exclusion:
==========================
``metadata.checksum`` and ``metadata.signature`` never take part in the
canonical form. If removing them leaves ``metadata`` empty, ``metadata`` is
dropped too, so a document that only ever carried integrity fields in its
metadata canonicalizes exactly like one with no metadata at all.

Supported types: dict (string keys), list, tuple, str, int, float, bool, None
Unsupported types, non-finite floats, integers outside the IEEE-754 safe
range and reference cycles raise EncodingError.
"""

import math
from typing import Any, Set

import rfc8785

from ratecard.app.errors import EncodingError
from ratecard.app.services.documents import (
    INTEGRITY_FIELDS,
    DocumentInput,
    load_document,
    strip_metadata_fields,
)

MAX_SAFE_INTEGER = 2**53 - 1


def json_c14n_v1(obj: Any) -> bytes:
    """
    Produce deterministic canonical JSON bytes for an object.

    Args:
        obj: A JSON-compatible Python object

    Returns:
        UTF-8 encoded canonical JSON bytes

    Raises:
        EncodingError: If obj contains unsupported types, non-finite numbers
            or reference cycles

    Examples:
        >>> json_c14n_v1({"b": 2, "a": 1})
        b'{"a":1,"b":2}'

        >>> json_c14n_v1([1.0, 2.5, 3])
        b'[1,2.5,3]'
    """
    normalized = _normalize(obj, set())

    try:
        return rfc8785.dumps(normalized)
    except (rfc8785.CanonicalizationError, UnicodeEncodeError) as e:
        raise EncodingError(f"Value cannot be canonicalized: {e}") from e


def canonicalize_document(document: DocumentInput) -> bytes:
    """
    Canonical bytes of a document with its integrity fields excluded.

    Args:
        document: Rate card document as a mapping or JSON text

    Returns:
        UTF-8 canonical JSON bytes

    Raises:
        ParseError: If JSON text input is malformed
        EncodingError: If the document is not canonicalizable
    """
    doc = strip_metadata_fields(load_document(document), INTEGRITY_FIELDS, drop_empty=True)
    return json_c14n_v1(doc)


def canonical_json(document: DocumentInput) -> str:
    """Canonical form of a document as text."""
    return canonicalize_document(document).decode("utf-8")


def _normalize(obj: Any, active: Set[int]) -> Any:
    """
    Recursively validate an object and return its plain JSON structure.

    Tuples become lists and mapping subclasses become dicts. ``active`` holds
    the ids of containers on the current path, so shared (non-cyclic)
    references are allowed while cycles are rejected.
    """
    if obj is None or isinstance(obj, (bool, str)):
        # bool must be checked before int since bool is a subclass of int
        return obj
    if isinstance(obj, int):
        if abs(obj) > MAX_SAFE_INTEGER:
            raise EncodingError(f"Integer outside the safe range: {obj}")
        return obj
    if isinstance(obj, float):
        if not math.isfinite(obj):
            raise EncodingError(f"Non-finite float not allowed: {obj}")
        return obj

    if isinstance(obj, (dict, list, tuple)):
        if id(obj) in active:
            raise EncodingError("Reference cycle detected")
        active.add(id(obj))
        try:
            if isinstance(obj, dict):
                out = {}
                for key, value in obj.items():
                    if not isinstance(key, str):
                        raise EncodingError(
                            f"Dictionary keys must be strings, got {type(key).__name__}"
                        )
                    out[key] = _normalize(value, active)
                return out
            return [_normalize(item, active) for item in obj]
        finally:
            active.discard(id(obj))

    raise EncodingError(f"Unsupported type: {type(obj).__name__}")
