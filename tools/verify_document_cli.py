#!/usr/bin/env python3
"""
Rate Card Offline Verifier

Verifies the checksum and embedded signature of a rate card document without
contacting any service.

Usage:
    python verify_document_cli.py <ratecard.json> [--public-key public.pem]

Exit Codes:
    0  - Verification passed
    1  - No checksum or signature present
    2  - Checksum invalid
    3  - Signature invalid
    4  - Public key unavailable
    10 - Document unreadable
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ratecard.app.config import configure_logging, get_config
from ratecard.app.errors import IntegrityError
from ratecard.app.services.checksum import verify_checksum
from ratecard.app.services.documents import (
    CHECKSUM_FIELD,
    INTEGRITY_FIELDS,
    SIGNATURE_FIELD,
    get_metadata_field,
    load_document,
    strip_metadata_fields,
)
from ratecard.app.services.hashing import hash_c14n
from ratecard.app.services.verifier import NO_PUBLIC_KEY, verify_signature


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


def verify_document(
    document: Dict[str, Any],
    public_key: Optional[str] = None,
    expected_algorithm: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run every applicable check and return a report.

    Checks that do not apply (no checksum, no signature) are reported as None.

    Raises:
        EncodingError: If the document has no canonical form
    """
    report: Dict[str, Any] = {
        "content_hash": hash_c14n(strip_metadata_fields(document, INTEGRITY_FIELDS, drop_empty=True)),
        "checksum_valid": None,
        "signature_valid": None,
        "errors": [],
    }

    if get_metadata_field(document, CHECKSUM_FIELD):
        result = verify_checksum(document)
        report["checksum_valid"] = result.valid
        report["checksum"] = result.model_dump()
        if not result.valid:
            report["errors"].append("checksum_mismatch")

    if get_metadata_field(document, SIGNATURE_FIELD):
        result = verify_signature(document, public_key, expected_algorithm=expected_algorithm)
        report["signature_valid"] = result.valid
        report["signature"] = result.model_dump(by_alias=True, exclude_none=True)
        if result.error == NO_PUBLIC_KEY:
            report["errors"].append("key_unavailable")
        elif not result.valid:
            report["errors"].append("signature_invalid")

    report["overall_valid"] = (
        not report["errors"]
        and (report["checksum_valid"] or report["signature_valid"]) is True
    )
    return report


def format_human_report(report: Dict[str, Any]) -> str:
    """Format a verification report for the terminal."""
    def status(value: Optional[bool]) -> str:
        if value is None:
            return f"{Colors.YELLOW}not present{Colors.RESET}"
        if value:
            return f"{Colors.GREEN}valid{Colors.RESET}"
        return f"{Colors.RED}INVALID{Colors.RESET}"

    lines = ["=" * 70, f"{Colors.BOLD}  RATE CARD INTEGRITY REPORT{Colors.RESET}", "=" * 70]
    lines.append(f"Content:   {report['content_hash']}")
    lines.append(f"Checksum:  {status(report['checksum_valid'])}")
    if "checksum" in report:
        lines.append(f"  expected: {report['checksum']['expected']}")
        lines.append(f"  actual:   {report['checksum']['actual']}")

    lines.append(f"Signature: {status(report['signature_valid'])}")
    signature = report.get("signature", {})
    info = signature.get("signatureInfo")
    if info:
        lines.append(f"  algorithm: {info['algorithm']}")
        if info.get("keyId"):
            lines.append(f"  key id:    {info['keyId']}")
        if info.get("timestamp"):
            lines.append(f"  signed at: {info['timestamp']}")
    if signature.get("error"):
        lines.append(f"  error:     {signature['error']}")

    lines.append("")
    if report["overall_valid"]:
        lines.append(f"{Colors.GREEN}{Colors.BOLD}PASS{Colors.RESET}")
    else:
        lines.append(f"{Colors.RED}{Colors.BOLD}FAIL{Colors.RESET}")
    lines.append("=" * 70)
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Verify the checksum and signature of a rate card document offline"
    )
    parser.add_argument("document", help="Path to rate card JSON file")
    parser.add_argument(
        "--public-key",
        help="Path to SPKI PEM public key (defaults to the key embedded in the signature)"
    )
    parser.add_argument(
        "--expected-algorithm",
        help="Reject signatures made with any other algorithm"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output machine-readable JSON report"
    )

    args = parser.parse_args()
    configure_logging("ERROR")

    try:
        document = load_document(Path(args.document).read_text(encoding="utf-8"))
    except (OSError, IntegrityError) as e:
        print(f"Error loading document: {e}", file=sys.stderr)
        sys.exit(10)

    public_key = None
    if args.public_key:
        try:
            public_key = Path(args.public_key).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error loading public key: {e}", file=sys.stderr)
            sys.exit(4)

    expected = args.expected_algorithm or get_config().EXPECTED_ALGORITHM
    try:
        report = verify_document(document, public_key, expected)
    except IntegrityError as e:
        print(f"Error reading document: {e}", file=sys.stderr)
        sys.exit(10)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(format_human_report(report))

    if report["checksum_valid"] is False:
        sys.exit(2)
    elif "key_unavailable" in report["errors"]:
        sys.exit(4)
    elif report["signature_valid"] is False:
        sys.exit(3)
    elif report["overall_valid"]:
        sys.exit(0)
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
