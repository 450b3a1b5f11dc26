"""Byte and text codecs used by the verification routines."""

import base64
import binascii
import re

from edgekit.errors import CodePointError, FormatError

_BASE64URL_RE = re.compile(r"[0-9A-Za-z_-]+")


def is_base64url(text: str) -> bool:
    """Check if text is a non-empty base64URL string."""
    return bool(_BASE64URL_RE.fullmatch(text))


def _ensure_bytes(data) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"data is not bytes-like: {type(data).__name__}")
    return bytes(data)


def bytes_to_latin1_string(data: bytes) -> str:
    """
    Convert bytes into a Latin-1 string, one character per byte.

    Raises:
        TypeError: data is not bytes, bytearray or memoryview
    """
    return _ensure_bytes(data).decode("latin-1")


def latin1_string_to_bytes(text: str, parameter: str = "string") -> bytes:
    """
    Convert a Latin-1 string into bytes, one byte per character.

    Raises:
        CodePointError: text contains a character above U+00FF
    """
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError:
        raise CodePointError(parameter) from None


def bytes_to_base64url(data: bytes) -> str:
    """
    Encode bytes as unpadded base64URL.

    The argument must be bytes-like. This is the encoding side of stored
    token hashes and signatures, so it is meant for trusted values only;
    untrusted input should go through the decoding side instead.
    """
    encoded = base64.urlsafe_b64encode(_ensure_bytes(data))
    return encoded.rstrip(b"=").decode("ascii")


def base64url_to_bytes(text: str, parameter: str = "string") -> bytes:
    """
    Decode an unpadded base64URL string.

    Args:
        text: The string to decode
        parameter: Argument name reported in the error

    Raises:
        FormatError: text is empty, contains a character outside the
            base64URL alphabet, or has an impossible length
    """
    if not is_base64url(text):
        raise FormatError(parameter)

    padding = "=" * (-len(text) % 4)
    try:
        return base64.urlsafe_b64decode(text + padding)
    except binascii.Error:
        # Only a 4n+1 character string gets here
        raise FormatError(
            parameter, f"{parameter} has an invalid base64URL length"
        ) from None
