"""
Checksum endpoints.

Stateless: documents are processed and returned, never stored.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ratecard.app.models.requests import DocumentRequest
from ratecard.app.services.checksum import (
    add_checksum,
    calculate_checksum,
    remove_checksum,
    verify_checksum,
)

router = APIRouter(prefix="/v1/checksum", tags=["checksum"])


@router.post("")
def compute_checksum(request: DocumentRequest) -> Dict[str, Any]:
    """Return the checksum of a document's canonical form."""
    return {"checksum": calculate_checksum(request.document)}


@router.post("/add")
def add_document_checksum(request: DocumentRequest) -> Dict[str, Any]:
    """Return the document with metadata.checksum set."""
    return {"document": add_checksum(request.document)}


@router.post("/verify")
def verify_document_checksum(request: DocumentRequest) -> Dict[str, Any]:
    """
    Verify metadata.checksum.

    A missing checksum is reported as valid=false with expected=null.
    """
    return verify_checksum(request.document).model_dump()


@router.post("/remove")
def remove_document_checksum(request: DocumentRequest) -> Dict[str, Any]:
    """Return the document without metadata.checksum."""
    return {"document": remove_checksum(request.document)}
