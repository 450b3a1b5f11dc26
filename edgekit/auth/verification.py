"""Token, signature and signed URL verification.

Every check is a coroutine returning ``True`` or ``False`` for a well-formed
credential. Malformed input raises a ``VerificationError`` subclass instead,
so callers can tell a bad request apart from a wrong credential.
"""

import asyncio
import hashlib
import hmac
import json
import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature
from jwcrypto import jwk
from jwcrypto.common import JWException

from edgekit.auth.canonical import SignedURL
from edgekit.codec import base64url_to_bytes, is_base64url, latin1_string_to_bytes
from edgekit.errors import (
    FormatError,
    InvalidPublicKeyError,
    LengthError,
    MissingSignatureError,
)

logger = logging.getLogger(__name__)

TOKEN_HASH_LENGTH = 64  # SHA-512 digest size
CURVE_NAME = "P-521"
ALGORITHM = "ES512"
# P-521 coordinates and signature halves are 66 bytes each
COORDINATE_LENGTH = 66


async def verify_token(token: str, expected_token_hash: str) -> bool:
    """
    Verify a token against its expected hash.

    Args:
        token: The token to verify. Must be base64URL-encoded
        expected_token_hash: The expected SHA-512 hash of the token's
            characters, base64URL-encoded

    Returns:
        Whether the token matches the expected hash

    Raises:
        FormatError: token or expected_token_hash is not base64URL
        LengthError: expected_token_hash does not decode to 64 bytes
    """
    if not is_base64url(token):
        raise FormatError("token")

    # The token's characters are hashed, not its decoded bytes. A base64URL
    # string is always ASCII, so this cannot fail here.
    token_hash = hashlib.sha512(latin1_string_to_bytes(token, "token")).digest()

    expected = base64url_to_bytes(expected_token_hash, "expected_token_hash")
    if len(expected) != TOKEN_HASH_LENGTH:
        raise LengthError("expected_token_hash", TOKEN_HASH_LENGTH)

    matched = hmac.compare_digest(token_hash, expected)
    logger.debug(f"Token verification {'succeeded' if matched else 'failed'}")
    return matched


def import_public_key(public_key: str) -> ec.EllipticCurvePublicKey:
    """
    Import an ECDSA P-521 public key from a JSON Web Key string.

    The key is only ever used to verify, and never exported again.

    Raises:
        InvalidPublicKeyError: public_key is not a P-521 public JWK allowed
            to verify signatures
    """
    try:
        params = json.loads(public_key)
    except (TypeError, ValueError):
        raise InvalidPublicKeyError("is not valid JSON") from None

    if not isinstance(params, dict):
        raise InvalidPublicKeyError("is not a JSON Web Key object")
    if params.get("kty") != "EC":
        raise InvalidPublicKeyError("is not an EC key")
    if params.get("crv") != CURVE_NAME:
        raise InvalidPublicKeyError(f"is not on curve {CURVE_NAME}")
    if params.get("alg", ALGORITHM) != ALGORITHM:
        raise InvalidPublicKeyError(f"is not an {ALGORITHM} key")
    if "d" in params:
        raise InvalidPublicKeyError("contains a private key")

    try:
        key = jwk.JWK(**params)
        verifying_key = key.get_op_key("verify")
    except (JWException, ValueError, TypeError) as e:
        raise InvalidPublicKeyError(f"cannot be imported: {e}") from None

    if not isinstance(verifying_key, ec.EllipticCurvePublicKey):
        raise InvalidPublicKeyError("is not an EC public key")
    return verifying_key


def _verify_ecdsa(public_key: str, signature: bytes, data: bytes) -> bool:
    """Import the key and check a raw ``r || s`` signature over data."""
    verifying_key = import_public_key(public_key)

    # WebCrypto signatures are fixed length; anything else cannot verify
    if len(signature) != 2 * COORDINATE_LENGTH:
        return False

    r = int.from_bytes(signature[:COORDINATE_LENGTH], "big")
    s = int.from_bytes(signature[COORDINATE_LENGTH:], "big")
    try:
        verifying_key.verify(
            encode_dss_signature(r, s),
            data,
            ec.ECDSA(hashes.SHA512()),
        )
    except InvalidSignature:
        return False
    return True


async def verify_signature(data: bytes, signature: str, public_key: str) -> bool:
    """
    Verify a signature over some data. Uses ECDSA with P-521 and SHA-512.

    Args:
        data: The signed data, used as-is
        signature: The raw ``r || s`` signature, base64URL-encoded
        public_key: An ECDSA P-521 JSON Web Key string

    Returns:
        Whether the signature is valid

    Raises:
        FormatError: signature is not base64URL
        InvalidPublicKeyError: public_key cannot be imported
    """
    signature_bytes = base64url_to_bytes(signature, "signature")
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"data is not bytes-like: {type(data).__name__}")

    valid = await asyncio.to_thread(
        _verify_ecdsa, public_key, signature_bytes, bytes(data)
    )
    logger.debug(f"Signature verification {'succeeded' if valid else 'failed'}")
    return valid


def canonicalize_signed_url(url: str) -> str:
    """
    Return the canonical form of a URL as it is signed.

    This is the WHATWG ``href`` of the URL with every ``sig`` query
    parameter removed: non-ASCII characters percent-encoded, host
    IDNA-encoded, query re-serialized as form data.

    Raises:
        InvalidURLError: url is not an absolute URL
    """
    return SignedURL(url).canonical


async def verify_signed_url(url: str, public_key: str) -> bool:
    """
    Verify a signed URL. Uses ECDSA with P-521 and SHA-512.

    Args:
        url: The URL to verify, signature in the ``sig`` query parameter
        public_key: An ECDSA P-521 JSON Web Key string

    Returns:
        Whether the URL's signature is valid

    Raises:
        InvalidURLError: url is not an absolute URL
        MissingSignatureError: url has no ``sig`` parameter
        FormatError: the signature is not base64URL
        InvalidPublicKeyError: public_key cannot be imported
    """
    signed_url = SignedURL(url)
    if not signed_url.signature:
        raise MissingSignatureError("url")

    # Percent-encoding keeps the canonical form ASCII
    return await verify_signature(
        latin1_string_to_bytes(signed_url.canonical, "url"),
        signed_url.signature,
        public_key,
    )
