#!/usr/bin/env python3
"""
Rate Card Signing Tool

Adds a checksum and/or an embedded signature to a rate card document, or
generates a PEM key pair to sign with.

Usage:
    python sign_document_cli.py keygen --algorithm ES256 --out-dir keys/
    python sign_document_cli.py sign ratecard.json --private-key keys/private.pem \\
        --algorithm ES256 --embed-public-key keys/public.pem --checksum -o signed.json

Exit Codes:
    0 - Success
    1 - Invalid input (document, key or algorithm)
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ratecard.app.config import SUPPORTED_ALGORITHMS, configure_logging
from ratecard.app.errors import IntegrityError
from ratecard.app.services.checksum import add_checksum
from ratecard.app.services.key_manager import generate_pem_key_pair
from ratecard.app.services.signer import sign_document


def keygen(args) -> int:
    out_dir = Path(args.out_dir)
    public_path = out_dir / "public.pem"
    private_path = out_dir / "private.pem"

    if not args.force and (public_path.exists() or private_path.exists()):
        print(f"Refusing to overwrite keys in {out_dir} (use --force)", file=sys.stderr)
        return 1

    key_pair = generate_pem_key_pair(args.algorithm)
    out_dir.mkdir(parents=True, exist_ok=True)
    public_path.write_text(key_pair.public_key + "\n", encoding="utf-8")
    private_path.write_text(key_pair.private_key + "\n", encoding="utf-8")
    private_path.chmod(0o600)

    print(f"Wrote {public_path} and {private_path}")
    return 0


def sign(args) -> int:
    try:
        document = json.loads(Path(args.document).read_text(encoding="utf-8"))
        private_key = Path(args.private_key).read_text(encoding="utf-8")
        public_key = (
            Path(args.embed_public_key).read_text(encoding="utf-8")
            if args.embed_public_key
            else None
        )
    except (OSError, ValueError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    try:
        if args.checksum:
            document = add_checksum(document)
        document = sign_document(
            document,
            private_key,
            args.algorithm,
            public_key=public_key,
            key_id=args.key_id,
            include_timestamp=False if args.no_timestamp else None,
        )
    except IntegrityError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = json.dumps(document, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
    else:
        print(output)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Sign rate card documents")
    subparsers = parser.add_subparsers(dest="command", required=True)

    keygen_parser = subparsers.add_parser("keygen", help="Generate a PEM key pair")
    keygen_parser.add_argument("--algorithm", choices=SUPPORTED_ALGORITHMS, help="Signing algorithm")
    keygen_parser.add_argument("--out-dir", default="keys", help="Output directory (default: keys)")
    keygen_parser.add_argument("--force", action="store_true", help="Overwrite existing key files")
    keygen_parser.set_defaults(func=keygen)

    sign_parser = subparsers.add_parser("sign", help="Add checksum and signature to a document")
    sign_parser.add_argument("document", help="Path to rate card JSON file")
    sign_parser.add_argument("--private-key", required=True, help="Path to PKCS#8 PEM private key")
    sign_parser.add_argument("--algorithm", choices=SUPPORTED_ALGORITHMS, help="Signing algorithm")
    sign_parser.add_argument("--key-id", help="Key identifier to embed")
    sign_parser.add_argument("--embed-public-key", help="Path to SPKI PEM public key to embed")
    sign_parser.add_argument("--checksum", action="store_true", help="Add metadata.checksum before signing")
    sign_parser.add_argument("--no-timestamp", action="store_true", help="Do not embed a signing timestamp")
    sign_parser.add_argument("-o", "--output", help="Write the signed document here (default: stdout)")
    sign_parser.set_defaults(func=sign)

    args = parser.parse_args()
    configure_logging("WARNING")
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
