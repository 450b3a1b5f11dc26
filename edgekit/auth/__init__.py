"""Authentication and signature verification."""

from edgekit.errors import (
    CodePointError,
    FormatError,
    InvalidPublicKeyError,
    InvalidURLError,
    LengthError,
    MissingSignatureError,
    VerificationError,
)
from edgekit.auth.verification import (
    canonicalize_signed_url,
    import_public_key,
    verify_signature,
    verify_signed_url,
    verify_token,
)

__all__ = [
    "verify_token",
    "verify_signature",
    "verify_signed_url",
    "canonicalize_signed_url",
    "import_public_key",
    "VerificationError",
    "FormatError",
    "CodePointError",
    "LengthError",
    "MissingSignatureError",
    "InvalidPublicKeyError",
    "InvalidURLError",
]
