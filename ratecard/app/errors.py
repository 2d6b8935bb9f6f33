"""
Error taxonomy for the rate card integrity layer.

Only malformed input is an error. A checksum or signature that does not match
is a normal result (``valid=False``) and is never raised.

    IntegrityError
    ├── EncodingError         value has no canonical form
    ├── ParseError            malformed JSON / PEM / signature record text
    ├── KeyMaterialError      unsupported algorithm, bad key bytes, key/algorithm mismatch
    └── CryptoOperationError  the sign/verify primitive itself failed

InvalidPemError is both a ParseError and a KeyMaterialError, so callers that
only care about "this key is unusable" can catch KeyMaterialError.
"""


class IntegrityError(Exception):
    """Base class for all integrity layer errors."""

    code = "integrity_error"


class EncodingError(IntegrityError):
    """A document value cannot be represented in canonical form."""

    code = "encoding_error"


class ParseError(IntegrityError):
    """Malformed JSON, PEM or signature record text."""

    code = "parse_error"


class KeyMaterialError(IntegrityError):
    """Unsupported algorithm, malformed key bytes or algorithm/key mismatch."""

    code = "key_error"


class InvalidPemError(ParseError, KeyMaterialError):
    """PEM text could not be decoded into a key."""

    code = "invalid_pem"


class CryptoOperationError(IntegrityError):
    """The underlying sign/verify primitive failed."""

    code = "crypto_error"
