"""
Document helpers shared by the checksum, signing and verification services.

A rate card document is a JSON object. Two reserved metadata fields,
``metadata.checksum`` and ``metadata.signature``, carry integrity artifacts.
Every helper here returns a new document; inputs are never mutated.
"""

import copy
import json
from typing import Any, Dict, Iterable, Mapping, Union

from ratecard.app.errors import EncodingError, ParseError

METADATA_FIELD = "metadata"
CHECKSUM_FIELD = "checksum"
SIGNATURE_FIELD = "signature"
INTEGRITY_FIELDS = (CHECKSUM_FIELD, SIGNATURE_FIELD)

DocumentInput = Union[Mapping[str, Any], str, bytes]


def load_document(doc: DocumentInput) -> Dict[str, Any]:
    """
    Return a private deep copy of a document.

    Args:
        doc: A mapping, or JSON text encoding an object

    Returns:
        A new dict the caller may freely modify

    Raises:
        ParseError: If JSON text is malformed or does not encode an object
        EncodingError: If a non-text value is not a mapping or cannot be copied
    """
    if isinstance(doc, (str, bytes, bytearray)):
        try:
            parsed = json.loads(doc)
        except (ValueError, UnicodeDecodeError) as e:
            raise ParseError(f"Document is not valid JSON: {e}") from e
        if not isinstance(parsed, dict):
            raise ParseError("Document JSON must be an object")
        return parsed

    if not isinstance(doc, Mapping):
        raise EncodingError(f"Document must be a mapping, got {type(doc).__name__}")

    try:
        return copy.deepcopy(dict(doc))
    except (TypeError, copy.Error) as e:
        raise EncodingError(f"Document cannot be copied: {e}") from e


def get_metadata_field(doc: Mapping[str, Any], field: str) -> Any:
    """Return ``metadata.<field>`` or None when metadata is absent or not an object."""
    metadata = doc.get(METADATA_FIELD)
    if isinstance(metadata, Mapping):
        return metadata.get(field)
    return None


def strip_metadata_fields(
    doc: Mapping[str, Any],
    fields: Iterable[str],
    drop_empty: bool = False,
) -> Dict[str, Any]:
    """
    Remove the named fields from ``metadata``.

    Only a metadata *object* is touched; a null or scalar metadata value is
    kept as-is. With ``drop_empty`` the metadata key itself is removed when
    nothing is left in it.
    """
    out = dict(doc)
    metadata = out.get(METADATA_FIELD)
    if not isinstance(metadata, Mapping):
        return out

    excluded = set(fields)
    remaining = {k: v for k, v in metadata.items() if k not in excluded}
    if drop_empty and not remaining:
        del out[METADATA_FIELD]
    else:
        out[METADATA_FIELD] = remaining
    return out


def merge_metadata(doc: Mapping[str, Any], **fields: Any) -> Dict[str, Any]:
    """Return a copy of ``doc`` whose metadata is updated with ``fields``."""
    out = dict(doc)
    metadata = out.get(METADATA_FIELD)
    merged = dict(metadata) if isinstance(metadata, Mapping) else {}
    merged.update(fields)
    out[METADATA_FIELD] = merged
    return out
