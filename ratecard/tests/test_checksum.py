"""
Tests for document checksums.

Covers the compute/add/verify/remove operations, tamper detection and the
"no checksum present" signal.
"""

import copy
import json
import re

import pytest

from ratecard.app.errors import EncodingError
from ratecard.app.services.checksum import (
    add_checksum,
    calculate_checksum,
    remove_checksum,
    verify_checksum,
)

SCENARIO_CHECKSUM = "1912459e3c549a73679662f199d916adcac2c8c9141dd0d5635e7739f920c733"


def test_checksum_is_fixed_for_reference_document(sample_document):
    """The reference document has a stable, reproducible checksum."""
    assert calculate_checksum(sample_document) == SCENARIO_CHECKSUM


def test_checksum_format(sample_document):
    """Checksums are 64 lowercase hex characters."""
    assert re.fullmatch(r"[0-9a-f]{64}", calculate_checksum(sample_document))


def test_checksum_differs_for_different_documents(sample_document):
    other = {**sample_document, "name": "Test2"}

    assert calculate_checksum(other) != calculate_checksum(sample_document)


def test_checksum_accepts_json_text(sample_document):
    assert calculate_checksum(json.dumps(sample_document)) == SCENARIO_CHECKSUM


def test_add_checksum_sets_metadata(sample_document):
    result = add_checksum(sample_document)

    assert result["metadata"]["checksum"] == SCENARIO_CHECKSUM


def test_add_checksum_does_not_modify_original(sample_document):
    original = copy.deepcopy(sample_document)

    add_checksum(sample_document)

    assert sample_document == original


def test_add_checksum_preserves_other_metadata(sample_document):
    doc = {**sample_document, "metadata": {"notes": "Q1 pricing", "signature": "sig"}}

    result = add_checksum(doc)

    assert result["metadata"]["notes"] == "Q1 pricing"
    assert result["metadata"]["signature"] == "sig"
    assert result["metadata"]["checksum"] == calculate_checksum(doc)


def test_add_checksum_replaces_stale_checksum(sample_document):
    doc = {**sample_document, "metadata": {"checksum": "0" * 64}}

    result = add_checksum(doc)

    assert result["metadata"]["checksum"] == SCENARIO_CHECKSUM


def test_verify_round_trip(sample_document):
    """verify(add(d)) is always valid."""
    result = verify_checksum(add_checksum(sample_document))

    assert result.valid is True
    assert result.expected == result.actual == SCENARIO_CHECKSUM


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.update(name="Tampered"),
        lambda d: d["cards"]["default"].update(currency="EUR"),
        lambda d: d.update(extra_field=1),
        lambda d: d["metadata"].update(notes="added later"),
    ],
    ids=["top_level", "nested", "added_field", "non_integrity_metadata"],
)
def test_verify_detects_tampering(sample_document, mutate):
    """Any change to a canonical-affecting field invalidates the checksum."""
    doc = add_checksum(sample_document)
    mutate(doc)

    result = verify_checksum(doc)

    assert result.valid is False
    assert result.expected == SCENARIO_CHECKSUM
    assert result.actual != SCENARIO_CHECKSUM


def test_verify_ignores_signature_changes(sample_document):
    """Adding or changing metadata.signature does not affect the checksum."""
    doc = add_checksum(sample_document)
    doc["metadata"]["signature"] = '{"algorithm":"RS256","signature":"AAAA"}'

    assert verify_checksum(doc).valid is True


def test_verify_key_order_independent(sample_document):
    doc = add_checksum(sample_document)
    reordered = dict(reversed(list(doc.items())))

    assert verify_checksum(reordered).valid is True


def test_verify_without_checksum_is_invalid(sample_document):
    """No stored checksum is reported as invalid, not raised."""
    result = verify_checksum(sample_document)

    assert result.valid is False
    assert result.expected is None
    assert result.actual == SCENARIO_CHECKSUM


def test_verify_accepts_json_text(sample_document):
    text = json.dumps(add_checksum(sample_document))

    assert verify_checksum(text).valid is True


def test_remove_checksum(sample_document):
    doc = add_checksum({**sample_document, "metadata": {"notes": "keep me"}})

    result = remove_checksum(doc)

    assert "checksum" not in result["metadata"]
    assert result["metadata"]["notes"] == "keep me"
    assert "checksum" in doc["metadata"]


def test_remove_checksum_without_metadata(sample_document):
    assert remove_checksum(sample_document) == sample_document


def test_unencodable_document_raises(sample_document):
    with pytest.raises(EncodingError):
        calculate_checksum({**sample_document, "rate": float("nan")})
